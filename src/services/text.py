"""
Default player-facing message templates.

Templates use ``str.format`` placeholders. Front ends that localize or
restyle output can swap the table with ``set_templates``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES: dict[str, str] = {
    # Generic
    "error.unknown_verb": "I don't know how to {verb} things.",
    "error.what": "What do you want to {verb}?",
    "error.not_found": "You don't see any {item} here.",
    "error.not_allowed": "You can't do that right now.",
    "error.cant_action": "You can't {verb} the {item}.",
    "error.too_dark": "It's too dark to see.",
    "error.no_effect": "Nothing happens.",
    # Inventory
    "error.cant_take": "You can't take the {item}.",
    "error.already_have": "You already have the {item}.",
    "error.not_holding": "You don't have the {item}.",
    "error.too_heavy": "The {item} is too heavy to carry along with everything else.",
    "success.take": "Taken.",
    "success.drop": "Dropped.",
    "success.done": "Done.",
    "inventory.empty": "You are empty-handed.",
    "inventory.carrying": "You are carrying:\n{items}",
    # Containers
    "error.not_container": "The {container} isn't a container.",
    "error.container_closed": "The {container} is closed.",
    "error.container_locked": "The {container} is locked.",
    "error.container_full": "The {container} is full.",
    "error.not_in_container": "The {item} isn't in the {container}.",
    "error.into_itself": "You can't put the {item} inside itself.",
    "error.already_open": "The {container} is already open.",
    "error.already_closed": "The {container} is already closed.",
    "error.already_locked": "The {container} is already locked.",
    "error.not_locked": "The {container} isn't locked.",
    "error.no_key": "You don't have anything that fits the {container}'s lock.",
    "error.not_lockable": "The {container} has no lock.",
    "error.close_first": "You'll have to close the {container} first.",
    "container.open": "You open the {container}.",
    "container.close": "You close the {container}.",
    "container.unlock": "You unlock the {container}.",
    "container.lock": "You lock the {container}.",
    "container.put": "You put the {item} in the {container}.",
    "container.contents": "The {container} contains: {items}.",
    "container.empty": "The {container} is empty.",
    # Light
    "light.not_source": "The {item} isn't a light source.",
    "light.on": "The {item} is now on.",
    "light.off": "The {item} is now off.",
    "light.already_on": "The {item} is already on.",
    "light.already_off": "The {item} is already off.",
    "light.dead": "The {item} has run out of power.",
    "light.died": "The {item} flickers and goes out.",
    "light.not_held": "You need to be holding the {item}.",
    "light.battery": "The {item} has {turns} turns of power remaining.",
    "light.battery_dead": "The {item} is dead.",
    "scene.dark": "It is pitch black. You are likely to be eaten by a grue.",
    # Movement
    "movement.cant_go": "You can't go that way.",
    "movement.too_dark": "It's too dark to see where you're going.",
    "movement.which_way": "Which way do you want to go?",
    "scene.objects": "You can see: {items}.",
    "scene.exits": "Exits: {exits}.",
    # Score
    "score.current": "Your score is {score} out of a possible {max_score}, in {turns} turns.",
    "score.trophy": "You have earned the {trophy} trophy!",
    "score.won": "All the treasures rest in the {container}. You have won!",
}

_templates: dict[str, str] = dict(DEFAULT_TEMPLATES)


def set_templates(templates: Mapping[str, str]) -> None:
    """Replace (or extend) the active template table."""
    _templates.update(templates)


def reset_templates() -> None:
    _templates.clear()
    _templates.update(DEFAULT_TEMPLATES)


def text(key: str, **params: object) -> str:
    """
    Render a template.

    Unknown keys are returned verbatim so a missing template is visible in
    play instead of crashing a command.
    """
    template = _templates.get(key)
    if template is None:
        logger.warning("No message template for key %s", key)
        return key
    try:
        return template.format(**params)
    except KeyError as e:
        logger.warning("Missing parameter %s for message template %s", e, key)
        return template
