#!/usr/bin/env python3
"""Validate SMTP configuration and connectivity.

Tests SMTP server reachability, STARTTLS and authentication, and can
send a test notification.

Usage:
    python -m notification_service.scripts.validate_smtp
    python -m notification_service.scripts.validate_smtp --verbose
    python -m notification_service.scripts.validate_smtp --test-email user@example.com
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from notification_service.clients.smtp import SMTPClient
from notification_service.config import NotificationConfig
from notification_service.core.exceptions import NotificationServiceError
from notification_service.core.logger import get_logger, setup_logging
from notification_service.models.smtp_config import SMTPConfig

logger = get_logger(__name__)


def print_header() -> None:
    print("\n" + "=" * 80)
    print("  📧 Notification Service SMTP Validator")
    print("=" * 80)


def print_footer() -> None:
    print("=" * 80 + "\n")


def print_config(config: NotificationConfig) -> None:
    """Print loaded SMTP configuration (password not shown).

    Args:
        config: NotificationConfig instance.
    """
    smtp_cfg = config.get_smtp_config()

    print("\n📋 Loaded Configuration:")
    print(f"  SMTP Host:      {smtp_cfg['host']}")
    print(f"  SMTP Port:      {smtp_cfg['port']}")
    print(f"  SMTP Username:  {smtp_cfg['username'] or '(not set)'}")
    print(f"  SMTP Password:  {'set' if smtp_cfg['password'] else '(not set)'}")
    print(f"  SMTP From:      {smtp_cfg['from_email']} ({smtp_cfg['from_name']})")
    print(f"  TLS Enabled:    {'Yes' if smtp_cfg['use_tls'] else 'No'}")
    print(f"  Timeout:        {smtp_cfg['timeout']}s")
    print(f"  Max Attempts:   {config.NOTIFY_MAX_RETRIES}")


def build_client(config: NotificationConfig) -> SMTPClient:
    """Create an SMTPClient from the loaded configuration.

    Raises:
        NotificationConfigError: If SMTP credentials are missing.
    """
    config.validate_smtp_config()
    return SMTPClient(SMTPConfig(**config.get_smtp_config()))


def validate_smtp_connection(client: SMTPClient) -> bool:
    """Validate SMTP connection.

    Returns:
        True if connection successful, False otherwise.
    """
    print("\n🧪 Testing SMTP Connection...")
    if client.validate_connection():
        print("✅ SMTP connection test PASSED")
        return True

    print("❌ SMTP connection test FAILED")
    return False


def send_test_email(client: SMTPClient, test_recipient: str) -> bool:
    """Send test email to verify delivery.

    Returns:
        True if test email sent successfully, False otherwise.
    """
    print(f"\n📧 Sending Test Email to: {test_recipient}")
    if client.send_test_email(test_recipient):
        print(f"✅ Test email sent successfully to {test_recipient}")
        print("   Check your inbox for the test email!")
        return True

    print(f"❌ Failed to send test email to {test_recipient}")
    return False


def print_recommendations(success: bool, test_email_success: Optional[bool] = None) -> None:
    """Print recommendations based on test results."""
    print("\n" + "-" * 80)
    print("📌 Recommendations:")

    if success:
        if test_email_success is None:
            print("  ✅ SMTP configuration is valid and connection works!")
            print("  → Start the service with: notification-service")
            print("  → Or optionally test with: --test-email your-email@example.com")
        elif test_email_success:
            print("  ✅ SMTP configuration is valid and test email was delivered!")
            print("  → Start the service with: notification-service")
        else:
            print("  ⚠️  SMTP connection works but test email delivery failed")
            print("  → Check recipient email address format")
            print("  → Verify email isn't blocked by spam filters")
    else:
        print("  ❌ SMTP connection failed. Troubleshooting steps:")
        print("  1. Verify SMTP_HOST and SMTP_PORT in .env file")
        print("     - Gmail: smtp.gmail.com:587 (TLS required)")
        print()
        print("  2. Verify SMTP credentials in .env file")
        print("     - SMTP_USER: your email address")
        print("     - SMTP_PASSWORD: Gmail 16-char app password (spaces are removed)")
        print()
        print("  3. Check that outbound TCP to the SMTP port is allowed")
        print()
        print("  4. Run again with --verbose and LOG_LEVEL=DEBUG")


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 if all tests passed, 1 if any test failed.
    """
    parser = argparse.ArgumentParser(
        description="Validate notification service SMTP configuration and connectivity.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m notification_service.scripts.validate_smtp
  python -m notification_service.scripts.validate_smtp --test-email user@example.com
  python -m notification_service.scripts.validate_smtp --quiet
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output (only errors and results)")
    parser.add_argument(
        "--test-email",
        "-t",
        type=str,
        metavar="EMAIL",
        help="Send a test email to the specified address",
    )
    parser.add_argument("--no-header", action="store_true", help="Suppress header and footer output")

    args = parser.parse_args(argv)

    setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        console_level="DEBUG" if args.verbose else "WARNING" if args.quiet else "INFO",
        enable_file=False,
    )

    if not args.no_header:
        print_header()

    exit_code = 0

    try:
        config = NotificationConfig()

        if not args.quiet:
            print_config(config)

        with build_client(config) as client:
            connection_success = validate_smtp_connection(client)

            test_email_success = None
            if args.test_email and connection_success:
                test_email_success = send_test_email(client, args.test_email)

        if not args.quiet:
            print_recommendations(connection_success, test_email_success)

        if not connection_success or test_email_success is False:
            exit_code = 1

    except NotificationServiceError as e:
        if not args.quiet:
            print(f"\n❌ {e}")
        logger.error(f"SMTP validation failed: {e}")
        exit_code = 1

    finally:
        if not args.no_header:
            print_footer()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
