"""
Starter World for the adventure engine.

Provides a pre-built world around the white house for players to
immediately start exploring:
- Four scenes outside the house and a forest
- The kitchen, living room, attic, closet and cellar inside
- A mailbox with a leaflet, a brass lantern, a trophy case and two
  treasures that win the game once they rest in the case
"""

from __future__ import annotations

from typing import Any

from src.engine.models import EngineConfig
from src.models.world import World, load_world
from src.services.score import Achievement

HOUSE_DESCRIPTION = (
    "The house is a beautiful colonial house which is painted white. "
    "It is clear that the owners must have been quite wealthy."
)

DARK = "It is pitch dark. You are likely to be eaten by a grue."

LEAFLET_TEXT = (
    "Welcome to Zork!\n\nZork is a game of adventure, danger, and low cunning. "
    "In it you will explore some of the most amazing territory ever seen by mortals."
)


def _house(enter_message: str | None = None) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "name": "White House",
        "aliases": ["house"],
        "visible_on_entry": True,
        "descriptions": HOUSE_DESCRIPTION,
        "interactions": {"examine": {"message": HOUSE_DESCRIPTION}},
    }
    if enter_message:
        obj["interactions"]["enter"] = {
            "message": enter_message,
            "requires": ["houseUnboarded"],
            "failure_message": enter_message,
        }
    return obj


def _boarded_windows(name: str) -> dict[str, Any]:
    return {
        "name": name,
        "aliases": ["windows", "boards"],
        "visible_on_entry": True,
        "descriptions": "The windows are all boarded up.",
        "interactions": {
            "examine": {"message": "The windows are boarded up with strong wooden boards."},
            "open": {
                "message": "The windows are all boarded up.",
                "requires": ["windowsUnboarded"],
                "failure_message": "The windows are all boarded up.",
            },
            "break": {
                "message": "The boards are too strong to break.",
                "requires": ["windowsUnboarded"],
                "failure_message": "The boards are too strong to break.",
            },
        },
    }


# =============================================================================
# Outside the House
# =============================================================================

WEST_OF_HOUSE: dict[str, Any] = {
    "name": "West of House",
    "region": "Outside House",
    "light": True,
    "descriptions": {
        "default": (
            "You are standing in an open field west of a white house, with a boarded "
            "front door. A small window is visible on this side of the house. There is "
            "a small mailbox here."
        ),
        "states": {
            "mailboxOpen,!hasLeaflet": (
                "You are standing in an open field west of a white house, with a boarded "
                "front door. A small window is visible on this side of the house. There is "
                "a small mailbox here, its door open."
            ),
            "windowOpen": (
                "You are standing in an open field west of a white house. A window on this "
                "side of the house stands open. There is a small mailbox here."
            ),
        },
    },
    "objects": {
        "house": _house("The door is boarded and cannot be opened."),
        "window": {
            "name": "Window",
            "aliases": ["small window"],
            "visible_on_entry": True,
            "descriptions": {
                "default": "The window is slightly ajar.",
                "states": {"windowOpen": "The window is open."},
            },
            "interactions": {
                "examine": {
                    "message": "The window is slightly ajar. It looks like it could be opened wider.",
                    "states": {"windowOpen": "The window is wide open, revealing the kitchen inside."},
                },
                "open": {
                    "message": "With a little effort, you open the window wide enough to enter.",
                    "grants": ["windowOpen"],
                    "requires": ["!windowOpen"],
                    "failure_message": "The window is already open.",
                    "score": 5,
                },
                "close": {
                    "message": "You close the window.",
                    "removes": ["windowOpen"],
                    "requires": ["windowOpen"],
                    "failure_message": "The window is already closed.",
                },
                "enter": {
                    "message": "You climb through the window into the kitchen.",
                    "requires": ["windowOpen"],
                    "failure_message": "The window needs to be opened wider first.",
                    "target_scene": "kitchen",
                },
            },
        },
        "mailbox": {
            "name": "Mailbox",
            "aliases": ["box", "small mailbox"],
            "visible_on_entry": True,
            "is_container": True,
            "capacity": 1,
            "contents": ["leaflet"],
            "scoring": {"open": 5},
            "descriptions": {
                "default": "There is a small mailbox here.",
                "empty": "The mailbox is empty.",
                "states": {"mailboxOpen": "The mailbox door is open."},
            },
        },
        "leaflet": {
            "name": "Leaflet",
            "aliases": ["mail", "advertisement"],
            "can_take": True,
            "weight": 1,
            "scoring": {"take": 5},
            "descriptions": {"default": "A simple leaflet.", "examine": LEAFLET_TEXT},
        },
        "door": {
            "name": "Front Door",
            "aliases": ["door"],
            "visible_on_entry": True,
            "descriptions": "The front door is boarded up.",
            "interactions": {
                "examine": {"message": "The door is boarded shut with large wooden planks."},
                "open": {
                    "message": "The door cannot be opened.",
                    "requires": ["houseUnboarded"],
                    "failure_message": "The door is securely boarded and cannot be opened.",
                },
            },
        },
    },
    "exits": [
        {"direction": "north", "target_scene": "northOfHouse",
         "description": "The path leads north along the house."},
        {"direction": "south", "target_scene": "southOfHouse",
         "description": "The path leads south along the house."},
        {"direction": "west", "target_scene": "forest",
         "description": "A forest path leads west into the trees."},
        {"direction": "east", "target_scene": "kitchen",
         "description": "You can enter through the window.",
         "requires": ["windowOpen"],
         "failure_message": "The window needs to be opened first."},
    ],
}

NORTH_OF_HOUSE: dict[str, Any] = {
    "name": "North of House",
    "region": "Outside House",
    "light": True,
    "descriptions": {
        "default": (
            "You are facing the north side of a white house. There is no door here, and "
            "all the windows are boarded up. To the north a narrow path winds through the "
            "trees. A tall chimney rises up the side of the house."
        ),
        "states": {
            "chimneySoot": (
                "You are facing the north side of a white house. There is no door here, and "
                "all the windows are boarded up. To the north a narrow path winds through the "
                "trees. A tall chimney, now covered in soot, rises up the side of the house."
            ),
        },
    },
    "objects": {
        "house": _house("There is no entrance on this side of the house."),
        "windows": _boarded_windows("Windows"),
        "chimney": {
            "name": "Chimney",
            "visible_on_entry": True,
            "descriptions": {
                "default": "The chimney rises up the side of the house. Wisps of smoke occasionally drift out.",
                "states": {"chimneySoot": "The chimney is now covered in soot from your attempt to climb it."},
            },
            "interactions": {
                "examine": {
                    "message": (
                        "The chimney is made of old red brick. It rises up the side of the "
                        "house and disappears over the roof."
                    ),
                    "states": {
                        "chimneySoot": "The chimney is now covered in soot. It was not a good idea to try climbing it."
                    },
                },
                "climb": {
                    "message": "You try to climb the chimney but quickly get covered in soot. This was not a good idea.",
                    "grants": ["chimneySoot"],
                    "score": -3,
                },
            },
        },
    },
    "exits": [
        {"direction": "west", "target_scene": "westOfHouse",
         "description": "The path leads west along the house."},
        {"direction": "east", "target_scene": "behindHouse",
         "description": "The path leads around to the back of the house."},
        {"direction": "north", "target_scene": "forest",
         "description": "A narrow path winds through the trees to the north."},
    ],
}

SOUTH_OF_HOUSE: dict[str, Any] = {
    "name": "South of House",
    "region": "Outside House",
    "light": True,
    "descriptions": (
        "You are facing the south side of a white house. There is no door here, and all "
        "the windows are boarded up. A path leads around the house to the east and west."
    ),
    "objects": {
        "house": _house("There is no entrance on this side of the house."),
        "windows": _boarded_windows("Boarded Windows"),
    },
    "exits": [
        {"direction": "east", "target_scene": "behindHouse",
         "description": "The path leads around to the east side of the house."},
        {"direction": "west", "target_scene": "westOfHouse",
         "description": "The path leads around to the west side of the house."},
    ],
}

BEHIND_HOUSE: dict[str, Any] = {
    "name": "Behind House",
    "region": "Outside House",
    "light": True,
    "descriptions": {
        "default": (
            "You are behind the white house. A path leads into the forest to the east. In "
            "one corner of the house there is a small window which is slightly ajar."
        ),
        "states": {
            "windowOpen": (
                "You are behind the white house. A path leads into the forest to the east. "
                "In one corner of the house there is a small window which is open."
            ),
            "windowBroken": (
                "You are behind the white house. A path leads into the forest to the east. "
                "In one corner of the house there is a small window which has been broken."
            ),
        },
    },
    "objects": {
        "house": _house(),
        "window": {
            "name": "Small Window",
            "aliases": ["window"],
            "visible_on_entry": True,
            "descriptions": {
                "default": "The window is slightly ajar.",
                "states": {
                    "windowOpen": "The window is open.",
                    "windowBroken": "The window is broken, with shards of glass around it.",
                },
            },
            "interactions": {
                "examine": {
                    "message": "The window is slightly ajar. You might be able to open it further.",
                    "states": {
                        "windowOpen": "The window is wide open, revealing the kitchen inside.",
                        "windowBroken": "The window is broken. You can see the kitchen through the broken glass.",
                    },
                },
                "open": {
                    "message": "With a little effort, you open the window wide enough to enter.",
                    "grants": ["windowOpen"],
                    "requires": ["!windowOpen", "!windowBroken"],
                    "failure_message": "The window won't open any further.",
                    "score": 5,
                },
                "close": {
                    "message": "You close the window.",
                    "removes": ["windowOpen"],
                    "requires": ["windowOpen", "!windowBroken"],
                    "failure_message": "The window isn't open.",
                },
                "break": {
                    "message": "You break the window. Not very subtle, but effective.",
                    "grants": ["windowBroken", "windowOpen"],
                    "requires": ["!windowBroken"],
                    "failure_message": "The window is already broken.",
                    "score": -5,
                },
                "enter": {
                    "message": "You climb through the window into the kitchen.",
                    "requires": ["windowOpen"],
                    "failure_message": "You need to open the window first.",
                    "target_scene": "kitchen",
                },
            },
        },
        "pump": {
            "name": "Water Pump",
            "aliases": ["pump"],
            "visible_on_entry": True,
            "descriptions": "An old-fashioned water pump stands here. It looks like it might still work.",
            "interactions": {
                "examine": {
                    "message": (
                        "The pump appears to be in working condition, though it might need "
                        "to be primed with water to get started."
                    ),
                    "states": {"pumpPrimed": "The pump is primed and water flows freely."},
                },
                "prime": {
                    "message": "You pour water into the pump. After a few pumps, water starts flowing freely!",
                    "requires": ["hasWater", "!pumpPrimed"],
                    "failure_message": "You need some water to prime the pump.",
                    "grants": ["pumpPrimed"],
                    "remove_from_inventory": ["water"],
                    "score": 10,
                },
            },
        },
    },
    "exits": [
        {"direction": "east", "target_scene": "forest",
         "description": "A forest path leads east."},
        {"direction": "north", "target_scene": "northOfHouse",
         "description": "The path leads north along the house."},
        {"direction": "south", "target_scene": "southOfHouse",
         "description": "The path leads south along the house."},
        {"direction": "west", "target_scene": "kitchen",
         "description": "You can enter the kitchen through the window.",
         "requires": ["windowOpen"],
         "failure_message": "You need to open the window first."},
    ],
}

FOREST: dict[str, Any] = {
    "name": "Forest",
    "region": "Above Ground",
    "light": True,
    "descriptions": {
        "default": "This is a forest, with trees in all directions. To the east, there appears to be sunlight.",
        "visited": "This is a dimly lit forest, with large trees all around.",
        "states": {
            "triedClimbing": (
                "This is a dimly lit forest, with large trees all around. The branches of "
                "the trees are still too high to reach."
            ),
        },
    },
    "objects": {
        "tree": {
            "name": "Tree",
            "aliases": ["trees"],
            "visible_on_entry": True,
            "descriptions": {
                "default": "The trees of the forest are tall with branches far above your reach.",
                "examine": "The trees here are quite tall, with branches too high to reach.",
                "states": {
                    "triedClimbing": (
                        "The trees remain tall with branches far above your reach, despite "
                        "your earlier attempts to climb them."
                    ),
                },
            },
            "interactions": {
                "climb": {
                    "message": "The lowest branches are out of your reach.",
                    "grants": ["triedClimbing"],
                    "score": 5,
                },
            },
        },
    },
    "exits": [
        {"direction": "south", "target_scene": "southOfHouse",
         "description": "You can see the house to the south."},
        {"direction": "east", "target_scene": "westOfHouse",
         "description": "The white house is visible to the east."},
    ],
}


# =============================================================================
# Inside the House
# =============================================================================

KITCHEN: dict[str, Any] = {
    "name": "Kitchen",
    "region": "Inside House",
    "light": True,
    "descriptions": {
        "default": (
            "You are in the kitchen of the white house. A table seems to have been used "
            "recently for the preparation of food. A passage leads to the west and a dark "
            "staircase can be seen leading upward. A window looks out onto the front yard."
        ),
        "states": {
            "windowOpen": (
                "You are in the kitchen of the white house. A table seems to have been used "
                "recently for the preparation of food. A passage leads to the west and a dark "
                "staircase can be seen leading upward. The window is open, letting in a fresh breeze."
            ),
        },
    },
    "objects": {
        "window": {
            "name": "Window",
            "visible_on_entry": True,
            "descriptions": {
                "default": "The window looks out onto the front yard.",
                "states": {"windowOpen": "The window is open, letting in a fresh breeze."},
            },
            "interactions": {
                "open": {
                    "message": "You open the window.",
                    "grants": ["windowOpen"],
                    "requires": ["!windowOpen"],
                    "failure_message": "The window is already open.",
                    "score": 5,
                },
                "close": {
                    "message": "You close the window.",
                    "removes": ["windowOpen"],
                    "requires": ["windowOpen"],
                    "failure_message": "The window is already closed.",
                },
            },
        },
        "table": {
            "name": "Table",
            "aliases": ["kitchen table"],
            "visible_on_entry": True,
            "descriptions": {
                "default": (
                    "The table seems to have been used recently for the preparation of food. "
                    "On it you can see a bottle of water and a clove of garlic."
                ),
                "states": {
                    "hasWater,hasGarlic": "The table seems to have been used recently for the preparation of food.",
                    "hasWater,!hasGarlic": (
                        "The table seems to have been used recently for the preparation of food. "
                        "On it you can see a clove of garlic."
                    ),
                    "!hasWater,hasGarlic": (
                        "The table seems to have been used recently for the preparation of food. "
                        "On it you can see a bottle of water."
                    ),
                },
            },
        },
        "water": {
            "name": "Bottle of Water",
            "aliases": ["bottle", "water"],
            "visible_on_entry": True,
            "can_take": True,
            "weight": 2,
            "scoring": {"take": 2},
            "descriptions": {
                "default": "A clear glass bottle full of water.",
                "examine": "The bottle is made of clear glass and is full of water.",
            },
            "interactions": {
                "drink": {
                    "message": "The water is cool and refreshing.",
                    "requires": ["hasWater"],
                    "failure_message": "You need to be holding the bottle.",
                    "remove_from_inventory": ["water"],
                },
            },
        },
        "garlic": {
            "name": "Garlic Clove",
            "aliases": ["garlic", "clove"],
            "visible_on_entry": True,
            "can_take": True,
            "weight": 1,
            "scoring": {"take": 2},
            "descriptions": {
                "default": "A fresh clove of garlic.",
                "examine": "The garlic clove looks fresh and pungent.",
            },
            "interactions": {
                "eat": {
                    "message": "The raw garlic is very strong! Your breath will smell for hours.",
                    "requires": ["hasGarlic"],
                    "failure_message": "You need to be holding the garlic.",
                    "remove_from_inventory": ["garlic"],
                },
            },
        },
        "sack": {
            "name": "Brown Sack",
            "aliases": ["sack", "bag"],
            "visible_on_entry": True,
            "can_take": True,
            "weight": 1,
            "is_container": True,
            "open": True,
            "capacity": 5,
            "scoring": {"take": 2},
            "descriptions": {
                "default": "The brown sack smells of hot peppers.",
                "empty": "The brown sack is empty.",
            },
        },
    },
    "exits": [
        {"direction": "west", "target_scene": "livingRoom",
         "description": "A passage leads west into the living room."},
        {"direction": "east", "target_scene": "westOfHouse",
         "description": "The window leads to the front of the house.",
         "requires": ["windowOpen"],
         "failure_message": "The window is closed."},
        {"direction": "up", "target_scene": "attic",
         "description": "The stairs are dark and dusty."},
    ],
}

LIVING_ROOM: dict[str, Any] = {
    "name": "Living Room",
    "region": "Inside House",
    "light": True,
    "descriptions": {
        "default": (
            "You are in the living room of the white house. A trophy case stands against "
            "the northern wall. A wooden door with gothic lettering leads east, and an "
            "archway leads west into the kitchen. There's a large oriental rug in the "
            "center of the room."
        ),
        "states": {
            "rugMoved": (
                "You are in the living room of the white house. A trophy case stands against "
                "the northern wall. A wooden door with gothic lettering leads east, and an "
                "archway leads west into the kitchen. A large oriental rug has been moved "
                "aside, revealing a trap door in the floor."
            ),
        },
    },
    "objects": {
        "trophyCase": {
            "name": "Trophy Case",
            "aliases": ["case", "trophy case"],
            "visible_on_entry": True,
            "is_container": True,
            "capacity": 10,
            "scoring": {"open": 5},
            "descriptions": {
                "default": "The trophy case is securely fastened to the wall.",
                "empty": "The trophy case is empty.",
                "states": {"trophyCaseOpen": "The trophy case is open, ready to display treasures."},
            },
        },
        "lantern": {
            "name": "Brass Lantern",
            "aliases": ["lantern", "lamp", "light"],
            "visible_on_entry": True,
            "can_take": True,
            "weight": 3,
            "provides_light": True,
            "descriptions": {
                "default": "A battery-powered brass lantern.",
                "states": {
                    "lanternDead": "The brass lantern is dark; its battery is exhausted.",
                    "lanternOn": "The brass lantern is on, casting a warm glow.",
                },
            },
        },
        "orientalRug": {
            "name": "Oriental Rug",
            "aliases": ["rug", "carpet"],
            "visible_on_entry": True,
            "descriptions": {
                "default": "A large, ornate oriental rug covers part of the floor.",
                "states": {"rugMoved": "The oriental rug has been moved aside, revealing a trap door."},
            },
            "interactions": {
                "move": {
                    "message": "With a great effort, you move the rug aside, revealing a trap door underneath!",
                    "grants": ["rugMoved"],
                    "requires": ["!rugMoved"],
                    "failure_message": "The rug has already been moved.",
                    "reveals": ["trapDoor"],
                    "score": 5,
                },
                "take": {
                    "message": "The rug is too heavy to take.",
                    "requires": ["rugLifted"],
                    "failure_message": "The rug is far too heavy to carry.",
                },
            },
        },
        "trapDoor": {
            "name": "Trap Door",
            "aliases": ["trapdoor", "trap door"],
            "descriptions": {
                "default": "A sturdy wooden trap door is set into the floor.",
                "states": {"trapDoorOpen": "The trap door is open, revealing a dark passage below."},
            },
            "interactions": {
                "open": {
                    "message": "You pull on the iron ring and the trap door opens with a creak.",
                    "grants": ["trapDoorOpen"],
                    "requires": ["rugMoved", "!trapDoorOpen"],
                    "failure_message": "The trap door is already open.",
                    "score": 5,
                },
                "close": {
                    "message": "You close the trap door with a solid thud.",
                    "removes": ["trapDoorOpen"],
                    "requires": ["trapDoorOpen"],
                    "failure_message": "The trap door is already closed.",
                },
            },
        },
        "gothicDoor": {
            "name": "Gothic Door",
            "aliases": ["door", "wooden door"],
            "visible_on_entry": True,
            "descriptions": {
                "default": "A wooden door with gothic lettering leads east.",
                "examine": 'The gothic lettering spells out "Closet" in an ornate, medieval style.',
                "states": {"gothicDoorOpen": "The gothic door is open, leading east."},
            },
            "interactions": {
                "open": {
                    "message": "The door opens smoothly.",
                    "grants": ["gothicDoorOpen"],
                    "requires": ["!gothicDoorOpen"],
                    "failure_message": "The door is already open.",
                },
                "close": {
                    "message": "You close the gothic door.",
                    "removes": ["gothicDoorOpen"],
                    "requires": ["gothicDoorOpen"],
                    "failure_message": "The door is already closed.",
                },
            },
        },
    },
    "exits": [
        {"direction": "west", "target_scene": "kitchen",
         "description": "An archway leads west to the kitchen."},
        {"direction": "east", "target_scene": "closet",
         "description": "A gothic door leads east to a closet.",
         "requires": ["gothicDoorOpen"],
         "failure_message": "The gothic door is closed."},
        {"direction": "down", "target_scene": "cellar",
         "description": "A trap door in the floor leads down to a cellar.",
         "requires": ["rugMoved", "trapDoorOpen"],
         "score": 10},
    ],
}

ATTIC: dict[str, Any] = {
    "name": "Attic",
    "region": "Inside House",
    "light": False,
    "descriptions": {
        "default": "This is the attic. The only exit is a stairway leading down. A large window overlooks the front lawn.",
        "dark": DARK,
        "states": {
            "hasLight": (
                "This is the attic. The room is cluttered with old furniture covered in white "
                "sheets. A thick rope is tied to a sturdy wooden beam. A large window overlooks "
                "the front lawn, and a stairway leads down."
            ),
        },
    },
    "objects": {
        "furniture": {
            "name": "Covered Furniture",
            "aliases": ["furniture", "sheets"],
            "visible_on_entry": True,
            "requires_light": True,
            "descriptions": "Several pieces of old furniture are covered with white sheets.",
            "interactions": {
                "uncover": {
                    "message": (
                        "You pull back one of the sheets, revealing some old wooden furniture. "
                        "Nothing particularly interesting."
                    ),
                    "requires_light": True,
                },
            },
        },
        "rope": {
            "name": "Thick Rope",
            "aliases": ["rope"],
            "visible_on_entry": True,
            "requires_light": True,
            "descriptions": "A thick rope is securely tied to one of the wooden beams.",
            "interactions": {
                "take": {
                    "message": "The rope is securely tied to the beam and cannot be removed.",
                    "requires": ["ropeUntied"],
                    "failure_message": "The rope is tied too tightly to the beam.",
                },
            },
        },
        "egg": {
            "name": "Jewel-Encrusted Egg",
            "aliases": ["egg", "jeweled egg"],
            "visible_on_entry": True,
            "requires_light": True,
            "can_take": True,
            "weight": 2,
            "is_treasure": True,
            "scoring": {"take": 5},
            "container_targets": {"trophyCase": 10},
            "descriptions": {
                "default": "A large egg encrusted with precious jewels rests in a nest of old sheets.",
                "examine": "The egg is covered with fine gold inlay and ornamented in lapis lazuli and mother-of-pearl.",
            },
        },
    },
    "exits": [
        {"direction": "down", "target_scene": "kitchen",
         "description": "A stairway leads down to the kitchen.",
         "requires_light": False},
    ],
}

CLOSET: dict[str, Any] = {
    "name": "Closet",
    "region": "Inside House",
    "light": False,
    "descriptions": {
        "default": "This is a cramped closet. The only exit is a gothic door leading west back to the living room.",
        "dark": DARK,
        "states": {
            "hasLight": (
                "This is a cramped closet filled with old coats and a rusty toolbox. A gothic "
                "door leads west back to the living room."
            ),
        },
    },
    "objects": {
        "coats": {
            "name": "Old Coats",
            "aliases": ["coats", "coat"],
            "visible_on_entry": True,
            "requires_light": True,
            "descriptions": "Several old coats hang from hooks on the wall.",
            "interactions": {
                "search": {
                    "message": "You search through the coat pockets but find nothing of interest.",
                    "requires_light": True,
                },
            },
        },
        "toolbox": {
            "name": "Rusty Toolbox",
            "aliases": ["toolbox", "box"],
            "visible_on_entry": True,
            "requires_light": True,
            "is_container": True,
            "capacity": 5,
            "contents": ["screwdriver"],
            "descriptions": {
                "default": "A rusty metal toolbox sits on the floor.",
                "empty": "The toolbox is empty.",
                "states": {"toolboxOpen": "The rusty toolbox stands open."},
            },
        },
        "screwdriver": {
            "name": "Screwdriver",
            "can_take": True,
            "weight": 1,
            "descriptions": "An ordinary flat-bladed screwdriver.",
        },
        "gothicDoor": {
            "name": "Gothic Door",
            "aliases": ["door"],
            "visible_on_entry": True,
            "descriptions": {
                "default": "A wooden door with gothic lettering leads west.",
                "examine": 'The gothic lettering spells out "Living Room" in an ornate, medieval style.',
                "states": {"gothicDoorOpen": "The gothic door is open, leading west to the living room."},
            },
            "interactions": {
                "open": {
                    "message": "The door opens smoothly.",
                    "grants": ["gothicDoorOpen"],
                    "requires": ["!gothicDoorOpen"],
                    "failure_message": "The door is already open.",
                },
                "close": {
                    "message": "You close the gothic door.",
                    "removes": ["gothicDoorOpen"],
                    "requires": ["gothicDoorOpen"],
                    "failure_message": "The door is already closed.",
                },
            },
        },
    },
    "exits": [
        {"direction": "west", "target_scene": "livingRoom",
         "description": "A gothic door leads west to the living room.",
         "requires": ["gothicDoorOpen"],
         "requires_light": False,
         "failure_message": "The gothic door is closed."},
    ],
}

CELLAR: dict[str, Any] = {
    "name": "Cellar",
    "region": "Inside House",
    "light": False,
    "descriptions": {
        "default": (
            "You are in a dark and damp cellar with a narrow passageway leading north, and a "
            "crawlway to the south. On the west is the bottom of a steep metal ramp which is "
            "unclimbable."
        ),
        "dark": DARK,
        "states": {
            "hasLight": (
                "You are in a dark and damp cellar. The walls are dirt and stone, with a steep "
                "metal ramp leading up to the west. The open trap door is above you."
            ),
        },
    },
    "objects": {
        "ramp": {
            "name": "Metal Ramp",
            "aliases": ["ramp"],
            "visible_on_entry": True,
            "requires_light": True,
            "descriptions": "The ramp is made of smooth, polished metal and is too steep to climb.",
            "interactions": {
                "climb": {
                    "message": "You scramble up the ramp.",
                    "requires": ["rampClimbable"],
                    "failure_message": "The ramp is too steep and slippery to climb.",
                },
            },
        },
        "chalice": {
            "name": "Silver Chalice",
            "aliases": ["chalice", "cup"],
            "visible_on_entry": True,
            "requires_light": True,
            "can_take": True,
            "weight": 3,
            "is_treasure": True,
            "scoring": {"take": 5},
            "container_targets": {"trophyCase": 10},
            "descriptions": {
                "default": "A tarnished silver chalice lies in the corner.",
                "examine": "Under the tarnish the chalice is engraved with a crest of three crowns.",
            },
        },
    },
    "exits": [
        {"direction": "up", "target_scene": "livingRoom",
         "description": "The open trap door leads up to the living room.",
         "requires": ["trapDoorOpen"],
         "requires_light": False,
         "failure_message": "The trap door above you is closed."},
    ],
}


STARTER_WORLD_DATA: dict[str, Any] = {
    "starting_scene": "westOfHouse",
    "scenes": {
        "westOfHouse": WEST_OF_HOUSE,
        "northOfHouse": NORTH_OF_HOUSE,
        "southOfHouse": SOUTH_OF_HOUSE,
        "behindHouse": BEHIND_HOUSE,
        "forest": FOREST,
        "kitchen": KITCHEN,
        "livingRoom": LIVING_ROOM,
        "attic": ATTIC,
        "closet": CLOSET,
        "cellar": CELLAR,
    },
}

STARTER_ACHIEVEMENTS: list[Achievement] = [
    Achievement(threshold=25, trophy="Curious Visitor"),
    Achievement(threshold=50, trophy="House Explorer"),
    Achievement(threshold=90, trophy="Treasure Hunter"),
]


def load_starter_world() -> World:
    """
    Build and validate the starter world.

    Returns:
        A validated World starting West of House
    """
    return load_world(STARTER_WORLD_DATA)


def starter_config(**overrides: Any) -> EngineConfig:
    """Engine config for the starter world, read from the environment."""
    overrides.setdefault("achievements", list(STARTER_ACHIEVEMENTS))
    overrides.setdefault("trophy_container_id", "trophyCase")
    return EngineConfig.from_env(**overrides)
