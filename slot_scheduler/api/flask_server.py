"""
Flask API server for the Assembly Slot Scheduler
"""
import logging
import signal
import sys
import threading
import time
import uuid
from datetime import datetime

from flask import Flask, jsonify, request
from flask_cors import CORS

from config.settings import Config
from slot_scheduler.scheduler import slot_scheduler as outcomes
from slot_scheduler.scheduler.errors import ScheduleStoreError
from slot_scheduler.scheduler.slot_scheduler import SlotScheduler
from utils.logger import SlotSchedulerLogger

logger = logging.getLogger(__name__)

STATUS_CODES = {
    outcomes.SCHEDULED: 200,
    outcomes.NOT_FOUND: 404,
    outcomes.INVALID: 400,
    outcomes.ERROR: 500,
}


class SlotSchedulerAPI:
    """
    Flask API server for form submissions and the daily check.

    The development server is threaded, so calls into the scheduler are
    serialized with a lock: one operation runs to completion at a time.
    """

    def __init__(self, config: Config = None, scheduler: SlotScheduler = None):
        self.config = config or Config()
        self.app = Flask(__name__)
        CORS(self.app)

        self.scheduler = scheduler or SlotScheduler(self.config)
        self._lock = threading.Lock()
        self.requests_processed = 0
        self.start_time = time.time()

        self._setup_routes()

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint"""
            return jsonify({
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "scheduler_available": self.scheduler is not None,
            })

        @self.app.route('/submit', methods=['POST'])
        def submit():
            """Receive one form submission and try to schedule it"""
            started = time.time()
            data = request.get_json(silent=True)
            if not isinstance(data, dict) or not data:
                logger.error("No JSON data received")
                return jsonify({"status": outcomes.INVALID, "errors": ["No JSON data provided"]}), 400

            request_id = data.get("request_id") or uuid.uuid4().hex[:12]
            logger.info(f"🚀 RECEIVED SUBMISSION: {request_id}")

            with self._lock:
                result = self.scheduler.process_submission(data)
                self.requests_processed += 1

            processing_time = time.time() - started
            SlotSchedulerLogger.log_submission(request_id, result.get("requester", {}), result, processing_time)
            result["request_id"] = request_id
            return jsonify(result), STATUS_CODES.get(result.get("status"), 500)

        @self.app.route('/reconcile', methods=['POST'])
        def reconcile():
            """Run the daily check now"""
            with self._lock:
                report = self.scheduler.run_daily_check()
            body = report.to_dict()
            status_code = 500 if report.errors else 200
            return jsonify(body), status_code

        @self.app.route('/status', methods=['GET'])
        def get_status():
            """Get server status and schedule statistics"""
            try:
                with self._lock:
                    schedule = self.scheduler.get_status()
            except ScheduleStoreError as e:
                logger.error(f"Cannot read schedule for status: {e}")
                schedule = {"error": str(e)}
            return jsonify({
                "status": "running",
                "requests_processed": self.requests_processed,
                "uptime": time.time() - self.start_time,
                "schedule": schedule,
            })

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({"error": "Endpoint not found"}), 404

        @self.app.errorhandler(405)
        def method_not_allowed(error):
            return jsonify({"error": "Method not allowed"}), 405

        @self.app.errorhandler(500)
        def internal_error(error):
            return jsonify({"error": "Internal server error"}), 500

    def _setup_signal_handlers(self):
        """Setup graceful shutdown handlers"""
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down gracefully...")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def run(self, host=None, port=None, debug=False):
        """Run the Flask server"""
        host = host or self.config.API_HOST
        port = port or self.config.API_PORT

        self._setup_signal_handlers()
        self.start_time = time.time()

        logger.info(f"Starting Assembly Slot Scheduler API on {host}:{port}")
        try:
            self.app.run(
                host=host,
                port=port,
                debug=debug,
                threaded=True,
                use_reloader=False,
            )
        except Exception as e:
            logger.error(f"Failed to start server: {e}")
            raise

    def shutdown(self):
        """Graceful shutdown"""
        logger.info("Shutting down Assembly Slot Scheduler API server...")


def create_app(config: Config = None, scheduler: SlotScheduler = None) -> Flask:
    """Factory function to create Flask app"""
    api = SlotSchedulerAPI(config, scheduler)
    return api.app
