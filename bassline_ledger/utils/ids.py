"""Record identifier generation"""

import uuid


def generate_id() -> str:
    """Unique record id; the trailing characters are random hex"""
    return f"id_{uuid.uuid4().hex}"
