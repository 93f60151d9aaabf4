import os
from dotenv import load_dotenv

# Load environment variables before config is imported
load_dotenv()

from recruitment import create_app, db, socketio

# Create application
app = create_app(os.getenv('FLASK_ENV', 'development'))


@app.shell_context_processor
def make_shell_context():
    """Make database and models available in Flask shell"""
    from recruitment.models.application import Application
    from recruitment.models.room import Room, Interviewer
    from recruitment.models.interview import Interview
    from recruitment.models.notification_job import NotificationJob
    from recruitment.models.result_confirmation import ResultConfirmation

    return {
        'db': db,
        'Application': Application,
        'Room': Room,
        'Interviewer': Interviewer,
        'Interview': Interview,
        'NotificationJob': NotificationJob,
        'ResultConfirmation': ResultConfirmation
    }


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    # Only enable debug mode in development
    debug_mode = os.getenv('FLASK_ENV') == 'development'
    # Use socketio.run() instead of app.run() for WebSocket support
    # Note: use_reloader=False to avoid port conflicts with eventlet
    socketio.run(app, host='0.0.0.0', port=port, debug=debug_mode, use_reloader=False)
