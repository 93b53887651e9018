"""Unit tests for the TopicConfig model."""

from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from sns_topic.config.models import TopicConfig


class TestTopicConfigDefaults:
    def test_defaults(self):
        config = TopicConfig()
        assert config.name == "serverless"
        assert config.region == "us-east-1"
        assert config.display_name == ""
        assert config.policy is None
        assert config.delivery_policy is None
        assert config.delivery_status_attributes == {}

    def test_accepts_camel_case_keys(self):
        config = TopicConfig.model_validate(
            {"displayName": "Orders", "deliveryPolicy": {"http": {}}}
        )
        assert config.display_name == "Orders"
        assert config.delivery_policy == {"http": {}}

    def test_accepts_snake_case_keys(self):
        config = TopicConfig.model_validate({"display_name": "Orders"})
        assert config.display_name == "Orders"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            TopicConfig.model_validate({"colour": "blue"})


class TestTopicName:
    @pytest.mark.parametrize("name", ["orders", "orders-events_v2", "orders.fifo"])
    def test_valid_names(self, name: str):
        assert TopicConfig(name=name).name == name

    @pytest.mark.parametrize("name", ["", "has space", "dots.in.name", "x" * 257])
    def test_invalid_names(self, name: str):
        with pytest.raises(ValidationError):
            TopicConfig(name=name)


class TestPolicyDocuments:
    def test_policy_as_json_text_is_decoded(self):
        config = TopicConfig(policy='{"Version": "2008-10-17"}')
        assert config.policy == {"Version": "2008-10-17"}

    def test_invalid_json_text_rejected(self):
        with pytest.raises(ValidationError, match="not a valid JSON document"):
            TopicConfig(delivery_policy="{oops")

    def test_non_serializable_policy_rejected(self):
        # What an unquoted YAML date turns into.
        with pytest.raises(ValidationError, match="not JSON-serializable"):
            TopicConfig(policy={"Version": datetime.date(2012, 10, 17)})


class TestDeliveryStatusAttributes:
    def test_list_of_mappings_is_flattened(self):
        config = TopicConfig(
            delivery_status_attributes=[
                {"HTTPSuccessFeedbackRoleArn": "arn:role"},
                {"SQSFailureFeedbackRoleArn": "arn:role"},
            ]
        )
        assert config.delivery_status_attributes == {
            "HTTPSuccessFeedbackRoleArn": "arn:role",
            "SQSFailureFeedbackRoleArn": "arn:role",
        }

    def test_keys_normalized_to_sns_names(self):
        config = TopicConfig(
            delivery_status_attributes={"lambdaSuccessFeedbackRoleArn": "arn:role"}
        )
        assert config.delivery_status_attributes == {
            "LambdaSuccessFeedbackRoleArn": "arn:role"
        }

    def test_numeric_values_become_text(self):
        config = TopicConfig(
            delivery_status_attributes={"HTTPSuccessFeedbackSampleRate": 50}
        )
        assert config.delivery_status_attributes == {
            "HTTPSuccessFeedbackSampleRate": "50"
        }

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError, match="unknown delivery status attribute"):
            TopicConfig(
                delivery_status_attributes={"FirehoseSuccessFeedbackRoleArn": "arn"}
            )

    @pytest.mark.parametrize("value", [True, None, ["a"], {"a": 1}])
    def test_non_scalar_value_rejected(self, value):
        with pytest.raises(ValidationError):
            TopicConfig(
                delivery_status_attributes={"HTTPSuccessFeedbackRoleArn": value}
            )

    def test_list_item_must_be_mapping(self):
        with pytest.raises(ValidationError, match="expected a mapping"):
            TopicConfig(delivery_status_attributes=["HTTPSuccessFeedbackRoleArn"])

    def test_null_means_empty(self):
        config = TopicConfig.model_validate({"delivery_status_attributes": None})
        assert config.delivery_status_attributes == {}
