"""Tests for the status CLI."""

from unittest import TestCase
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from lambda_bridge.cli.status import main


class TestStatusCLI(TestCase):
    """Tests for the status CLI command."""

    def setUp(self):
        self.runner = CliRunner()

    def test_status_requires_queue_url(self):
        result = self.runner.invoke(main, [])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Missing option", result.output)

    @patch("lambda_bridge.cli.status.ic")
    @patch("lambda_bridge.cli.status.QueueRepository")
    def test_status_prints_metrics(self, mock_repo_class, mock_ic):
        mock_repo = MagicMock()
        metrics = {"ApproximateNumberOfMessages": "5", "ApproximateNumberOfMessagesNotVisible": "1"}
        mock_repo.metrics = AsyncMock(return_value=metrics)
        mock_repo_class.return_value = mock_repo

        result = self.runner.invoke(main, ["--queue-url", "https://sqs/my_queue"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Queue status", result.output)
        mock_repo.metrics.assert_awaited_once_with("https://sqs/my_queue")
        mock_ic.assert_called_once_with(metrics)
        mock_repo.close.assert_called_once()

    @patch("lambda_bridge.cli.status.QueueRepository")
    def test_status_fails_when_queue_does_not_exist(self, mock_repo_class):
        mock_repo = MagicMock()
        mock_repo.metrics = AsyncMock(side_effect=RuntimeError("NonExistentQueue"))
        mock_repo_class.return_value = mock_repo

        result = self.runner.invoke(main, ["--queue-url", "https://sqs/missing_queue"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Cannot read queue", result.output)
        mock_repo.close.assert_called_once()

    @patch("lambda_bridge.cli.status.ic")
    @patch("lambda_bridge.cli.status.QueueRepository")
    def test_status_uses_region_from_env(self, mock_repo_class, mock_ic):
        mock_repo = MagicMock()
        mock_repo.metrics = AsyncMock(return_value={})
        mock_repo_class.return_value = mock_repo

        result = self.runner.invoke(
            main,
            ["--queue-url", "q1"],
            env={"SQS_LAMBDA_AWS_REGION": "ap-southeast-2"},
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(mock_repo_class.call_args[0][0].aws_region, "ap-southeast-2")
