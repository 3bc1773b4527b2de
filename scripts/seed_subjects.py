#!/usr/bin/env python3
"""One-time seeding of the subject directory. Safe to re-run."""

import asyncio
import logging

from peerlearn.core import database
from peerlearn.core.logging import setup_logging
from peerlearn.services.subject_service import SubjectService

logger = logging.getLogger("seed_subjects")

SUBJECTS = [
    ("Mathematics", "Algebra, calculus, geometry"),
    ("Physics", "Mechanics, electromagnetism"),
    ("Chemistry", "Organic, inorganic, physical"),
    ("Computer Science", "Programming, data structures"),
    ("Biology", "Genetics, cell biology"),
    ("Design", "UX/UI, typography, visual design"),
    ("Business", "Marketing, finance, strategy"),
]

async def seed():
    database.init_engine()
    try:
        async with database.AsyncSessionLocal() as session:
            service = SubjectService(session)
            for name, description in SUBJECTS:
                subject = await service.find_or_create_by_name(name, description)
                logger.info(f"Subject ready: {subject.name} ({subject.id})")
    finally:
        await database.dispose_engine()

if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
