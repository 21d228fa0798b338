#!/usr/bin/env python3
"""
Demo script showing slog usage.

This example demonstrates:
1. Structured logging with inherited fields and child loggers
2. Routing the standard logging module through slog
3. An async output function that fails without affecting the caller
"""

import asyncio

from slog import JsonLog, setup_logging

log = JsonLog(level='DEBUG', init={'service': 'demo'})


def demo_structured_logging():
    """Demo structured JSON logging"""
    print("\n=== slog Structured Logging Demo ===")

    log.info("Application started")
    log.info({'msg': "User login", 'user_id': 123, 'ip': '192.168.1.1'})
    log.warn("High memory usage", {'memory_percent': 85.5})

    request_log = log.child({'request_id': 'req-456'})
    try:
        raise ValueError("Something went wrong")
    except ValueError as e:
        request_log.error({'msg': "Error processing request", 'error': e})


def demo_stdlib_bridge():
    """Demo logging module integration"""
    print("\n=== stdlib logging bridge ===")

    logger = setup_logging(log.child({'via': 'logging'}), name='demo.stdlib')
    logger.propagate = False
    logger.info("Hello from logging", extra={'context': {'user_id': 7}})


async def demo_async_sink():
    """Demo a failing async output function"""
    print("\n=== async output function ===")

    async def unreliable(line):
        await asyncio.sleep(0.01)
        raise ConnectionError("collector unavailable")

    JsonLog(func=unreliable).info("sent in the background")
    await asyncio.sleep(0.1)


if __name__ == '__main__':
    demo_structured_logging()
    demo_stdlib_bridge()
    asyncio.run(demo_async_sink())
