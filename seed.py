"""
Default data: the system user that authors the built-in actions, and the
actions themselves. Safe to run repeatedly; existing documents are kept.

    python seed.py
"""
import logging
import os

import database
from models import actions, users

logger = logging.getLogger(__name__)

DEFAULT_USER = {
    "name": "YouPower",
    "email": os.getenv("DEFAULT_USER_EMAIL", "youpower@example.com"),
    "password": os.getenv("DEFAULT_USER_PASSWORD", "change-me-please"),
}

DEFAULT_ACTIONS = [
    {
        "name": "Turn off lights when leaving a room",
        "nameIt": "Spegni le luci quando esci da una stanza",
        "nameSe": "Släck lampor när du lämnar ett rum",
        "description": "Lights left on in empty rooms are the easiest waste to cut.",
        "category": "lighting",
        "type": "routine",
        "impact": 2,
        "effort": 1,
    },
    {
        "name": "Wash clothes at 30 degrees",
        "nameIt": "Lava i vestiti a 30 gradi",
        "nameSe": "Tvätta kläder i 30 grader",
        "description": "Most detergents work well at 30 degrees and heating water is the bulk of a wash cycle's energy.",
        "category": "laundry",
        "type": "routine",
        "impact": 3,
        "effort": 1,
    },
    {
        "name": "Use the washing machine only with full loads",
        "nameIt": "Usa la lavatrice solo a pieno carico",
        "description": "Running fewer, fuller loads saves both water and electricity.",
        "category": "laundry",
        "type": "regular",
        "impact": 3,
        "effort": 2,
    },
    {
        "name": "Lower the indoor temperature by one degree",
        "nameSe": "Sänk inomhustemperaturen en grad",
        "description": "Each degree less of heating saves about five percent of heating energy.",
        "category": "heating",
        "type": "onetime",
        "season": "winter",
        "impact": 4,
        "effort": 2,
    },
    {
        "name": "Replace halogen bulbs with LEDs",
        "nameIt": "Sostituisci le lampadine alogene con LED",
        "nameSe": "Byt halogenlampor mot LED",
        "description": "LED bulbs use a fraction of the power for the same light.",
        "category": "lighting",
        "type": "onetime",
        "impact": 4,
        "effort": 3,
    },
    {
        "name": "Switch off standby appliances at night",
        "description": "A power strip with a switch turns off TVs, consoles and chargers in one go.",
        "category": "appliances",
        "type": "routine",
        "impact": 2,
        "effort": 2,
    },
    {
        "name": "Defrost the freezer",
        "nameIt": "Sbrina il congelatore",
        "description": "Ice build-up makes the compressor work harder.",
        "category": "appliances",
        "type": "irregular",
        "season": "spring",
        "impact": 2,
        "effort": 3,
    },
]


def ensure_seed_data():
    user = database.collection("user").find_one({"email": DEFAULT_USER["email"]})
    if not user:
        user = users.register(DEFAULT_USER["name"], DEFAULT_USER["email"], DEFAULT_USER["password"])
    else:
        logger.info("default user already exists: %s", user["_id"])

    created = 0
    for action in DEFAULT_ACTIONS:
        if database.collection("action").find_one({"name": action["name"]}, {"_id": 1}):
            continue
        actions.create(dict(action), user["_id"])
        created += 1
    logger.info("seeded %d default actions", created)
    return created


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    ensure_seed_data()
