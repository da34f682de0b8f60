import asyncio

from dotenv import load_dotenv

from .config import get_settings
from .database import Base, build_engine
import brandsite.models  # noqa: F401  registers every model on Base.metadata


async def create_tables(engine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _main():
    engine = build_engine(get_settings())
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()
    print("✅ Tables created successfully")


def main():
    load_dotenv()
    asyncio.run(_main())


if __name__ == "__main__":
    main()
