"""
Smoke test client for a running Assembly Slot Scheduler server
"""
import json
import logging
import time
from typing import Any, Dict, List

import requests

VALID_STATUSES = {"scheduled", "not_found", "invalid", "error"}


class SlotSchedulerSmokeClient:
    """Exercises the HTTP API of a live server"""

    def __init__(self, base_url: str = "http://localhost:5000", timeout: float = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def check_health(self) -> bool:
        """Test health check endpoint"""
        try:
            response = requests.get(f"{self.base_url}/health", timeout=5)
            if response.status_code == 200:
                self.logger.info("Health check passed")
                return True
            self.logger.error(f"Health check failed: {response.status_code}")
            return False
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Health check error: {e}")
            return False

    def send_submission(self, submission: Dict[str, Any]) -> Dict[str, Any]:
        """Send one form submission and return the response summary"""
        try:
            start_time = time.time()
            response = requests.post(
                f"{self.base_url}/submit",
                json=submission,
                timeout=self.timeout,
                headers={'Content-Type': 'application/json'},
            )
            response_time = time.time() - start_time
            self.logger.info(f"Submission answered {response.status_code} (RT: {response_time:.2f}s)")
            return {
                "status_code": response.status_code,
                "data": response.json(),
                "response_time": response_time,
            }
        except requests.exceptions.Timeout:
            self.logger.error("Request timeout")
            return {"status_code": None, "error": "timeout"}
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.error(f"Request error: {e}")
            return {"status_code": None, "error": str(e)}

    def validate_response_format(self, response_data: Dict[str, Any]) -> List[str]:
        """Check a /submit response body, returning a list of problems"""
        errors = []
        status = response_data.get("status")
        if status not in VALID_STATUSES:
            errors.append(f"Unexpected status: {status}")
        if status == "scheduled":
            booking = response_data.get("booking") or {}
            for field in ("booking_id", "date", "start", "end", "rows"):
                if field not in booking:
                    errors.append(f"Booking missing field: {field}")
        elif status in ("not_found", "invalid") and not response_data.get("errors"):
            errors.append(f"Status {status} without errors")
        return errors

    def run_smoke_suite(self, submissions: List[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run health check and each submission, comparing status codes"""
        results = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "health_check": self.check_health(),
            "tests": [],
            "summary": {"total": 0, "passed": 0, "failed": 0},
        }

        for case in submissions or self.default_cases():
            response = self.send_submission(case["payload"])
            problems = []
            if response.get("status_code") not in case["expected_codes"]:
                problems.append(f"HTTP {response.get('status_code')} not in {case['expected_codes']}")
            if "data" in response:
                problems.extend(self.validate_response_format(response["data"]))

            passed = not problems
            results["tests"].append({"name": case["name"], "passed": passed, "problems": problems})
            results["summary"]["total"] += 1
            results["summary"]["passed" if passed else "failed"] += 1

        return results

    @staticmethod
    def default_cases() -> List[Dict[str, Any]]:
        return [
            {
                "name": "flat submission",
                "expected_codes": (200, 404),
                "payload": {
                    "email": "smoke.test@example.org",
                    "name": "Smoke Test",
                    "class_name": "4A",
                    "subject": "Smoke test sharing",
                    "time_requested": "5 minutes",
                },
            },
            {
                "name": "missing email",
                "expected_codes": (400,),
                "payload": {"namedValues": {"Name": ["No Email"]}},
            },
        ]


def print_results(results: Dict[str, Any]):
    summary = results["summary"]
    print(f"\nSmoke Test Results:")
    print(f"  Total: {summary['total']}")
    print(f"  Passed: {summary['passed']}")
    print(f"  Failed: {summary['failed']}")
    print(f"  Health check: {'✓' if results['health_check'] else '✗'}")
    for test in results["tests"]:
        if not test["passed"]:
            print(f"  ✗ {test['name']}: {json.dumps(test['problems'])}")
