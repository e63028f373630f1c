"""
Unit tests for the evaluation decode pipeline.
"""

import pytest

from juristcu.models.domain import Evaluation
from juristcu.validation.exceptions import ResponseParseFailure
from juristcu.validation.pipeline import INVALID_REPLY_JUSTIFICATION, EvaluationParser


class TestEvaluationParser:

    def setup_method(self):
        self.parser = EvaluationParser(justification_max_length=200)

    def test_parses_valid_reply(self):
        evaluation = self.parser.parse('{"atende": true, "justificativa": "Há evidência clara"}')
        assert evaluation == Evaluation(atende=True, justificativa="Há evidência clara")

    def test_clips_long_justification(self):
        reply = '{"atende": false, "justificativa": "%s"}' % ("x" * 500)
        evaluation = self.parser.parse(reply)
        assert len(evaluation.justificativa) == 200

    def test_custom_cap(self):
        parser = EvaluationParser(justification_max_length=10)
        evaluation = parser.parse('{"atende": true, "justificativa": "abcdefghijklmnop"}')
        assert evaluation.justificativa == "abcdefghij"

    def test_schema_failure_raises(self):
        with pytest.raises(ResponseParseFailure):
            self.parser.parse('{"atende": "sim", "justificativa": "ok"}')

    @pytest.mark.parametrize(
        "reply",
        [
            "",
            "O acórdão atende ao critério.",
            '{"atende": "true", "justificativa": "ok"}',
            '{"justificativa": "sem veredito"}',
            '{"atende": true, "justificativa": ',
        ],
    )
    def test_parse_or_default_degrades_to_not_met(self, reply):
        evaluation = self.parser.parse_or_default(reply)
        assert evaluation.atende is False
        assert evaluation.justificativa == INVALID_REPLY_JUSTIFICATION

    def test_parse_or_default_passes_valid_reply_through(self):
        evaluation = self.parser.parse_or_default('texto {"atende": true, "justificativa": "ok"} fim')
        assert evaluation.atende is True
        assert evaluation.justificativa == "ok"
