import bcrypt
import asyncio
from concurrent.futures import ThreadPoolExecutor

from core.environment import get_bcrypt_rounds

# bcrypt is CPU bound, keep it off the event loop
_executor = ThreadPoolExecutor(thread_name_prefix="bcrypt")

async def hash_password_async(password: str) -> str:
    loop = asyncio.get_running_loop()
    salt = await loop.run_in_executor(
        _executor, bcrypt.gensalt, get_bcrypt_rounds()
    )
    hashed_password = await loop.run_in_executor(
        _executor, bcrypt.hashpw, password.encode('utf-8'), salt
    )
    return hashed_password.decode('utf-8')

async def verify_password_async(password: str, hashed_password: str) -> bool:
    loop = asyncio.get_running_loop()
    is_valid = await loop.run_in_executor(
        _executor, bcrypt.checkpw, password.encode('utf-8'), hashed_password.encode('utf-8')
    )
    return is_valid
