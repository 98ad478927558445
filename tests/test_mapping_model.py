"""Tests for mapping validation and defaults."""

import math
from unittest import TestCase

from lambda_bridge.errors import ConfigurationError
from lambda_bridge.mapping_model_dto import Mapping, QueueMessage, identity, noop, validate_mappings


class TestValidateMappings(TestCase):
    """Tests for validate_mappings."""

    def test_rejects_missing_or_empty_input(self):
        for mappings in (None, [], (), {}, "queue"):
            with self.assertRaises(ConfigurationError) as ctx:
                validate_mappings(mappings)
            self.assertIn("must be a non-empty list", str(ctx.exception))

    def test_rejects_missing_function_name(self):
        mappings = [{"queueUrl": "foo"}]
        with self.assertRaises(ConfigurationError) as ctx:
            validate_mappings(mappings)
        self.assertIn('"queueUrl": "foo"', str(ctx.exception))
        self.assertIs(ctx.exception.mappings, mappings)

    def test_rejects_falsy_identifiers(self):
        for descriptor in (
            {"queue_url": "", "function_name": "fn"},
            {"queue_url": "q", "function_name": None},
            {"queue_url": "q", "function_name": ""},
        ):
            with self.assertRaises(ConfigurationError):
                validate_mappings([descriptor])

    def test_one_bad_descriptor_rejects_all(self):
        with self.assertRaises(ConfigurationError):
            validate_mappings([{"queue_url": "q", "function_name": "fn"}, {"queue_url": "q2"}])

    def test_rejects_non_dict_descriptor(self):
        with self.assertRaises(ConfigurationError):
            validate_mappings(["q"])

    def test_rejects_out_of_range_options(self):
        with self.assertRaises(ConfigurationError):
            validate_mappings([{"queue_url": "q", "function_name": "fn", "max_number_of_messages": 0}])
        with self.assertRaises(ConfigurationError):
            validate_mappings([{"queue_url": "q", "function_name": "fn", "number_of_runs": -1}])
        with self.assertRaises(ConfigurationError):
            validate_mappings([{"queue_url": "q", "function_name": "fn", "message_formatter": "upper"}])

    def test_rejects_booleans_for_numeric_options(self):
        for field in ("number_of_runs", "max_number_of_messages", "wait_time_seconds", "visibility_timeout"):
            with self.assertRaises(ConfigurationError):
                validate_mappings([{"queue_url": "q", "function_name": "fn", field: True}])

    def test_applies_defaults(self):
        (mapping,) = validate_mappings([{"queue_url": "q", "function_name": "fn"}])
        self.assertEqual(mapping.max_number_of_messages, 5)
        self.assertEqual(mapping.wait_time_seconds, 5)
        self.assertIsNone(mapping.visibility_timeout)
        self.assertIs(mapping.message_formatter, identity)
        self.assertIsNone(mapping.number_of_runs)
        self.assertTrue(mapping.unbounded)
        self.assertFalse(mapping.delete_message)
        self.assertIs(mapping.on_completion, noop)

    def test_accepts_camel_case_keys(self):
        def observer(error, value):
            pass

        (mapping,) = validate_mappings(
            [
                {
                    "queueUrl": "q",
                    "functionName": "fn",
                    "maxNumberOfMessages": 10,
                    "waitTimeSeconds": 0,
                    "visibilityTimeout": 30,
                    "numberOfRuns": 2,
                    "deleteMessage": True,
                    "onLambdaComplete": observer,
                }
            ]
        )
        self.assertEqual(mapping.queue_url, "q")
        self.assertEqual(mapping.function_name, "fn")
        self.assertEqual(mapping.max_number_of_messages, 10)
        self.assertEqual(mapping.wait_time_seconds, 0)
        self.assertEqual(mapping.visibility_timeout, 30)
        self.assertEqual(mapping.number_of_runs, 2)
        self.assertTrue(mapping.delete_message)
        self.assertIs(mapping.on_completion, observer)

    def test_infinite_runs_normalized(self):
        (mapping,) = validate_mappings([{"queue_url": "q", "function_name": "fn", "number_of_runs": math.inf}])
        self.assertIsNone(mapping.number_of_runs)

    def test_passes_mapping_instances_through(self):
        mapping = Mapping(queue_url="q", function_name="fn")
        self.assertEqual(validate_mappings((mapping,)), [mapping])


class TestQueueMessage(TestCase):
    """Tests for QueueMessage accessors."""

    def test_accessors(self):
        message = QueueMessage(queue_url="q", raw={"MessageId": "m1", "ReceiptHandle": "h1", "Body": "b"})
        self.assertEqual(message.message_id, "m1")
        self.assertEqual(message.receipt_handle, "h1")
        self.assertEqual(message.body, "b")

    def test_missing_fields_are_none(self):
        message = QueueMessage(queue_url="q", raw={})
        self.assertIsNone(message.receipt_handle)
        self.assertIsNone(message.body)
