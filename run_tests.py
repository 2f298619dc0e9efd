#!/usr/bin/env python3
"""
Test runner for the shortlink service.

Runs the suite against a throwaway SQLite file and the in-process cache, so
a developer's shortlink.db and any local Redis are never touched. Extra
arguments are passed straight to pytest, e.g.:

    python run_tests.py -k redirect
"""

import os
import subprocess
import sys
import tempfile


def isolated_environment(workdir: str) -> dict:
    """Environment overrides picked up by shortlink_app.config.Settings"""
    env = os.environ.copy()
    env.update({
        "DATABASE_URL": f"sqlite:///{os.path.join(workdir, 'shortlink-test.db')}",
        "STORE_BACKEND": "sqlalchemy",
        "CACHE_BACKEND": "memory",
        "LOG_LEVEL": "WARNING",
    })
    return env


def run_tests(pytest_args=None):
    """Run the test suite"""
    print("🧪 Running Shortlink Tests")
    print("=" * 40)

    # Change to project directory
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    with tempfile.TemporaryDirectory(prefix="shortlink-") as workdir:
        try:
            subprocess.run(
                [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short", *(pytest_args or [])],
                env=isolated_environment(workdir),
                check=True,
            )
        except subprocess.CalledProcessError as e:
            print(f"\n❌ Tests failed with exit code {e.returncode}")
            return e.returncode
        except FileNotFoundError:
            print("❌ pytest not found. Install with: pip install -e '.[test]'")
            return 1

    print("\n✅ All tests passed!")
    return 0


if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
