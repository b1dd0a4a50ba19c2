#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

TaskFlow - collaborative project management backend
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Development settings by default
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # TaskFlow shortcuts
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Initial setup
        if command == 'setup':
            print("🚀 Setting up TaskFlow...")

            print("📊 Applying migrations...")
            if os.system('python manage.py migrate') != 0:
                print("❌ Migrations failed")
                return

            print("📁 Collecting static files...")
            os.system('python manage.py collectstatic --noinput')

            print("🌱 Seeding demo data...")
            os.system('python manage.py seed')

            print("✅ Setup complete!")
            return

        elif command == 'backup':
            print("💾 Creating database backup...")
            from datetime import datetime
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_taskflow_{timestamp}.json"
            os.system(f'python manage.py dumpdata core --indent 2 > {backup_file}')
            print(f"✅ Backup created: {backup_file}")
            return

        # Reset
        elif command == 'reset':
            confirm = input("⚠️  This will delete ALL data. Continue? (y/N): ")
            if confirm.lower() == 'y':
                print("🗑️  Resetting database...")
                os.system('python manage.py flush --noinput')
                os.system('python manage.py migrate')
                os.system('python manage.py seed')
                print("✅ Reset complete!")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
