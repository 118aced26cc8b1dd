"""单写者事务封装

同一 StoreGroup 的所有写操作共享一个 asyncio.Lock，
并以 BEGIN IMMEDIATE 开启事务：进程内由锁串行化，
多进程共享同一数据库文件时由 SQLite 写锁（配合 busy_timeout）串行化。
Task ID 分配 + 插入、降级 + 激活都必须在同一个事务内完成。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite


@asynccontextmanager
async def write_transaction(
    conn: aiosqlite.Connection,
    lock: asyncio.Lock,
) -> AsyncIterator[aiosqlite.Connection]:
    """在单写者锁内执行一个写事务

    Args:
        conn: 数据库连接
        lock: 该连接对应的写锁

    Yields:
        同一个数据库连接

    Raises:
        Exception: 事务体内的任何异常，回滚后原样抛出
    """
    async with lock:
        await conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            await conn.commit()
        except BaseException:
            await conn.rollback()
            raise
