"""
Flask-SocketIO Manager
Pushes live notification queue counts to connected admin dashboards
"""
from flask_socketio import SocketIO, emit, join_room, leave_room


ADMIN_ROOM = 'recruitment_admins'


def emit_queue_status(counts):
    """
    Broadcast notification queue counts to admin dashboards.

    Args:
        counts: Dict with queued, sent, failed and total counts
    """
    from recruitment import socketio

    try:
        socketio.emit('notification_queue_status', counts, to=ADMIN_ROOM)
    except Exception as e:
        print(f"[SOCKETIO] Error emitting queue status: {e}")


def init_socketio_events(socketio: SocketIO):
    """
    Initialize Socket.IO event handlers.

    Args:
        socketio: Flask-SocketIO instance
    """

    @socketio.on('join_recruitment_admins')
    def handle_join_admins(data=None):
        """Subscribe the client to queue status updates"""
        join_room(ADMIN_ROOM)
        emit('joined', {'room': ADMIN_ROOM})

    @socketio.on('leave_recruitment_admins')
    def handle_leave_admins(data=None):
        leave_room(ADMIN_ROOM)
        emit('left', {'room': ADMIN_ROOM})
