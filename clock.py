"""
Scheduler for periodic tasks
Run with: python clock.py

For Heroku Scheduler, use individual commands:
- python clock.py process_notifications
- python clock.py maintenance
"""
import sys
import os

# Ensure the application is in the path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from recruitment import create_app

# Create Flask application
app = create_app(os.getenv('FLASK_ENV', 'production'))


def run_notification_processor():
    """Deliver queued notifications that are due"""
    with app.app_context():
        from recruitment.workers.notification_worker import process_notification_backlog
        result = process_notification_backlog()
        print(f"\n[SCHEDULER] Notification Processor Result: {result}")
        return result


def run_maintenance():
    """Run full maintenance (lease release and backlog sweep)"""
    with app.app_context():
        from recruitment.workers.notification_worker import periodic_notification_maintenance
        result = periodic_notification_maintenance()
        print(f"\n[SCHEDULER] Maintenance Result: {result}")
        return result


if __name__ == '__main__':
    command = sys.argv[1] if len(sys.argv) > 1 else 'maintenance'

    if command == 'process_notifications':
        print("[SCHEDULER] Running notification processor...")
        result = run_notification_processor()
    elif command == 'maintenance':
        print("[SCHEDULER] Running full maintenance...")
        result = run_maintenance()
    else:
        print(f"Unknown command: {command}")
        print("Available commands: process_notifications, maintenance")
        sys.exit(1)

    if not result.get('success'):
        print("[SCHEDULER] Job finished with errors")
        sys.exit(1)

    print("[SCHEDULER] Job completed successfully")
