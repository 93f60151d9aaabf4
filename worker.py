"""
RQ Worker for background job processing
Delivers result notification emails from the notification queue
"""
import os
import sys
from redis import Redis
from rq import Worker, Queue

# Ensure the application is in the path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from recruitment import create_app

# Create Flask application
app = create_app(os.getenv('FLASK_ENV', 'production'))

# REDIS_URL already carries ssl_cert_reqs for rediss://
redis_url = app.config['REDIS_URL']
redis_conn = Redis.from_url(redis_url)

# List of queues to listen on
listen_queues = [app.config['NOTIFICATION_QUEUE_NAME']]

if __name__ == '__main__':
    with app.app_context():
        worker = Worker([Queue(name, connection=redis_conn) for name in listen_queues], connection=redis_conn)
        print(f"Starting RQ worker listening on queues: {', '.join(listen_queues)}")
        print(f"Redis URL: {redis_url}")
        # Scheduler picks up retries pushed with enqueue_in
        worker.work(with_scheduler=True)
