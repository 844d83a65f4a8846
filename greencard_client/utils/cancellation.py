"""Helpers for telling caller cancellation apart from lower-layer cancellation"""

import asyncio


def current_task_cancelling() -> bool:
    """True when someone requested cancellation of the task running this code"""
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0
