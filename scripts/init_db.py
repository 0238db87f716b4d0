"""
Database initialization script

Run once (or after a schema change) to create the users indexes:
    python scripts/init_db.py
    python scripts/init_db.py --drop   # drop and recreate
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

from app.core.logging import setup_logging, get_logger
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_users_collection
from app.db.indexes import create_indexes, drop_all_indexes

setup_logging()
logger = get_logger("scripts.init_db")


async def main(drop: bool):
    await connect_to_mongo()
    try:
        if drop:
            await drop_all_indexes()
        await create_indexes()
        
        indexes = await get_users_collection().index_information()
        for name, info in indexes.items():
            logger.info(f"  {name}: {info['key']} unique={info.get('unique', False)}")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create MongoDB indexes for the users collection")
    parser.add_argument("--drop", action="store_true", help="drop existing indexes first")
    args = parser.parse_args()
    asyncio.run(main(args.drop))
