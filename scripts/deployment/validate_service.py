#!/usr/bin/env python3
"""
Validation script for QR link service.
Exercises a running service end to end: health, QR generation, redirects
and expiration.
"""

import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

import requests


class ServiceValidator:
    """Validates QR link service functionality."""

    def __init__(self, base_url: str = "http://localhost:3000", expiry_seconds: int = 3):
        self.base_url = base_url.rstrip("/")
        self.expiry_seconds = expiry_seconds
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"[{status}] {name}")
        if details:
            print(f"       {details}")

    def generate(self, body: dict) -> requests.Response:
        return self.session.post(f"{self.base_url}/api/generate", json=body, timeout=10)

    def test_health_check(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            data = response.json()
            passed = response.status_code == 200 and data.get("status") == "healthy"
            self.print_test("Health Check", passed, f"DB: {data.get('database')}, Cache: {data.get('cache')}")
            return passed
        except requests.RequestException as e:
            self.print_test("Health Check", False, f"Error: {e}")
            return False

    def test_generate_url(self) -> Optional[str]:
        """Generate a shortened URL QR code and check the redirect."""
        target = f"https://example.com/validate/{int(time.time())}"
        try:
            response = self.generate({"type": "url", "data": {"url": target}})
            data = response.json()
            passed = (
                response.status_code == 200
                and data.get("qrCode", "").startswith("data:image/png;base64,")
                and bool(data.get("shortId"))
            )
            self.print_test("Generate URL QR code", passed, f"Short URL: {data.get('shortUrl')}")
            if not passed:
                return None

            redirect = self.session.get(
                f"{self.base_url}/r/{data['shortId']}", allow_redirects=False, timeout=5
            )
            self.print_test(
                "Short link redirects",
                redirect.status_code == 302 and redirect.headers.get("location") == target,
                f"Status: {redirect.status_code}",
            )
            return data["shortId"]
        except requests.RequestException as e:
            self.print_test("Generate URL QR code", False, f"Error: {e}")
            return None

    def test_expiring_link(self):
        """Create a link that expires shortly and watch it turn into 410."""
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.expiry_seconds)
        try:
            response = self.generate({
                "type": "url",
                "data": {"url": "https://example.com/expiring", "expiresAt": expires_at.isoformat()},
            })
            if response.status_code != 200:
                self.print_test("Expiring link", False, f"Status: {response.status_code}")
                return
            short_id = response.json()["shortId"]
            url = f"{self.base_url}/r/{short_id}"

            before = self.session.get(url, allow_redirects=False, timeout=5)
            self.print_test("Expiring link redirects before expiry", before.status_code == 302)

            time.sleep(self.expiry_seconds + 1)
            after = self.session.get(url, allow_redirects=False, timeout=5)
            self.print_test("Expiring link is gone after expiry", after.status_code == 410)
        except requests.RequestException as e:
            self.print_test("Expiring link", False, f"Error: {e}")

    def test_other_payloads(self):
        bodies = {
            "Text QR code": {"type": "text", "data": {"text": "hello"}},
            "Wi-Fi QR code": {"type": "wifi", "data": {"ssid": "Office", "password": "secret"}},
            "Email QR code": {"type": "email", "data": {"to": "a@example.com", "subject": "Hi"}},
            "SVG rendering": {"type": "text", "data": {"text": "svg"}, "renderOptions": {"format": "svg"}},
        }
        for name, body in bodies.items():
            try:
                response = self.generate(body)
                self.print_test(name, response.status_code == 200, f"Status: {response.status_code}")
            except requests.RequestException as e:
                self.print_test(name, False, f"Error: {e}")

    def test_rejections(self):
        cases = {
            "Rejects past expiration": {
                "type": "url",
                "data": {"url": "https://example.com", "expiresAt": "2000-01-01T00:00:00Z"},
            },
            "Rejects malformed expiration": {
                "type": "url",
                "data": {"url": "https://example.com", "expiresAt": "not-a-date"},
            },
            "Rejects unsupported type": {"type": "vcard", "data": {}},
            "Rejects empty text": {"type": "text", "data": {"text": ""}},
        }
        for name, body in cases.items():
            try:
                response = self.generate(body)
                self.print_test(name, response.status_code == 400, f"Status: {response.status_code}")
            except requests.RequestException as e:
                self.print_test(name, False, f"Error: {e}")

    def test_unknown_link(self):
        try:
            response = self.session.get(f"{self.base_url}/r/doesNotExist", allow_redirects=False, timeout=5)
            self.print_test("Unknown short link returns 404", response.status_code == 404)
        except requests.RequestException as e:
            self.print_test("Unknown short link returns 404", False, f"Error: {e}")

    def run_all_tests(self) -> bool:
        self.print_header(f"Validating QR Link Service at {self.base_url}")

        if not self.test_health_check():
            print("\nService is not healthy, skipping remaining checks")
            self.print_summary()
            return False

        self.test_generate_url()
        self.test_other_payloads()
        self.test_rejections()
        self.test_unknown_link()
        self.test_expiring_link()

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"Passed:       {passed}")
        print(f"Failed:       {failed}")

        if failed > 0:
            print("\nFailed tests:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")
        print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Validate QR link service functionality")
    parser.add_argument(
        "--url",
        default="http://localhost:3000",
        help="Base URL of the service (default: http://localhost:3000)"
    )
    parser.add_argument(
        "--expiry-seconds",
        type=int,
        default=3,
        help="Lifetime of the link used to check expiration"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url, expiry_seconds=args.expiry_seconds)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
