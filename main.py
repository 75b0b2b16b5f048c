#!/usr/bin/env python3
"""
linkwalker example runner
Checks a local directory or a URL and prints the broken links
"""

import asyncio
import sys
from linkwalker import CheckerBuilder
from linkwalker.monitoring import LogManager

async def main(target):
    """Check target recursively and report"""
    report = await (CheckerBuilder(target)
                    .recurse()
                    .concurrency(20)
                    .timeout(10)
                    .with_progress()
                    .run())

    print(f"\nChecked {len(report.links)} links")
    for link in report.broken:
        print(f"  [{link.status or '---'}] {link.url}")
        if link.parent:
            print(f"        found on {link.parent}")
    return report.passed

if __name__ == "__main__":
    LogManager(log_level="INFO")
    target = sys.argv[1] if len(sys.argv) > 1 else "."
    try:
        passed = asyncio.run(main(target))
    except KeyboardInterrupt:
        print("\nCheck stopped by user")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
    print("All links OK" if passed else "Broken links found")
    sys.exit(0 if passed else 1)
