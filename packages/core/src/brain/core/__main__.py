"""CLI 入口模块 -- python -m brain.core <command>

支持的命令：
  init-db        创建数据库与表结构
  resync-vault   把数据库中全部笔记 / Artifact / 任务重新写入 Vault 镜像
"""

import asyncio
import sys

from .config import get_db_path, get_vault_path

_PAGE_SIZE = 200


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m brain.core <command>")
        print("命令:")
        print("  init-db        创建数据库与表结构")
        print("  resync-vault   重新写入全部 Vault 镜像文件")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "resync-vault":
        if get_vault_path() is None:
            print("未配置 BRAIN_VAULT_PATH，镜像未启用")
            sys.exit(1)
        asyncio.run(resync_vault())
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, resync-vault")
        sys.exit(1)


async def init_database() -> None:
    """创建数据库文件并执行建表"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")
    store_group = await create_store_group(db_path)
    await store_group.close()
    print("初始化完成")


async def resync_vault() -> int:
    """分页遍历全部实体并逐个写入镜像，返回写入文件数"""
    from .mirror import VaultMirror
    from .store import create_store_group

    db_path = get_db_path()
    vault_path = get_vault_path()
    print(f"数据库路径: {db_path}")
    print(f"Vault 目录: {vault_path}")

    mirror = VaultMirror(vault_path)
    store_group = await create_store_group(db_path)
    written = 0

    try:
        offset = 0
        while True:
            notes, _ = await store_group.note_store.list_notes(None, None, _PAGE_SIZE, offset)
            for note in notes:
                mirror.sync(note)
            written += len(notes)
            if len(notes) < _PAGE_SIZE:
                break
            offset += _PAGE_SIZE

        offset = 0
        while True:
            artifacts, _ = await store_group.artifact_store.list_artifacts(
                None, None, _PAGE_SIZE, offset
            )
            for artifact in artifacts:
                mirror.sync(artifact)
            written += len(artifacts)
            if len(artifacts) < _PAGE_SIZE:
                break
            offset += _PAGE_SIZE

        offset = 0
        while True:
            tasks = await store_group.task_store.list_tasks(None, None, _PAGE_SIZE, offset)
            for task in tasks:
                mirror.sync(task)
            written += len(tasks)
            if len(tasks) < _PAGE_SIZE:
                break
            offset += _PAGE_SIZE
    finally:
        await store_group.close()

    print(f"同步完成，写入 {written} 个文件")
    return written


if __name__ == "__main__":
    main()
