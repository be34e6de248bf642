#!/usr/bin/env python
"""Command-line entry point for the campus health backend.

Points Django at ``campushealth.settings`` and hands the arguments to
Django's management utility (``migrate``, ``runserver``,
``ensure_test_users``, ``seed_consultation_dates`` and friends).
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campushealth.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Install the project with "
            "`pip install -e .` inside an activated virtual environment."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
