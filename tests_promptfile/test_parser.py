"""
Tests for promptfile text parsing.
"""

import pytest

from promptfile import LlmEndpoint, Prompt, parse_prompts, decode_option_value
from promptfile.options import OptionKind


class TestRecords:
    """Tests for record boundaries."""

    def test_user_only(self):
        """Test the smallest valid record."""
        result = parse_prompts("$$begin\n$$user\nHello\n$$end")

        assert result == [Prompt(user="Hello")]

    def test_system_and_user(self):
        """Test that system and user sections are both read."""
        raw = "$$begin\n$$system\nYou are a helpful assistant\n$$user\nWhat is 2+2?\n$$end"

        result = parse_prompts(raw)

        assert len(result) == 1
        assert result[0].system == "You are a helpful assistant"
        assert result[0].user == "What is 2+2?"

    def test_multiple_records(self):
        """Test that records are returned in source order."""
        raw = "$$begin\n$$user\nFirst\n$$end\n$$begin\n$$user\nSecond\n$$end"

        result = parse_prompts(raw)

        assert [p.user for p in result] == ["First", "Second"]

    def test_text_without_begin_returns_empty_list(self):
        """Test that plain text yields no prompts."""
        assert parse_prompts("Just some text without prompts") == []
        assert parse_prompts("") == []

    def test_text_outside_records_is_ignored(self):
        """Test that text before, between and after records is ignored."""
        raw = (
            "Random text\n"
            "$$begin\n$$user\nFirst\n$$end\n"
            "Between records\n"
            "$$begin\n$$user\nSecond\n$$end\n"
            "Trailing text"
        )

        result = parse_prompts(raw)

        assert [p.user for p in result] == ["First", "Second"]

    def test_record_without_user_is_dropped(self):
        """Test that a record with only a system section is skipped."""
        raw = "$$begin\n$$system\nOnly system, no user\n$$end"

        assert parse_prompts(raw) == []

    def test_record_with_blank_user_is_dropped(self):
        """Test that a user section holding only blank lines is skipped."""
        raw = "$$begin\n$$user\n\n   \n$$end"

        assert parse_prompts(raw) == []

    def test_begin_closes_open_record(self):
        """Test back-to-back records without $$end."""
        raw = "$$begin\n$$user\nFirst\n$$begin\n$$user\nSecond\n$$end"

        result = parse_prompts(raw)

        assert [p.user for p in result] == ["First", "Second"]

    def test_unterminated_record_is_dropped(self):
        """Test that a record cut off at the end of the text is skipped."""
        raw = "$$begin\n$$user\nDone\n$$end\n$$begin\n$$user\nCut off"

        result = parse_prompts(raw)

        assert [p.user for p in result] == ["Done"]

    def test_markers_tolerate_surrounding_whitespace(self):
        """Test that marker lines are matched after trimming."""
        raw = "  $$begin\r\n$$user  \r\nHello\r\n$$end \r\n"

        result = parse_prompts(raw)

        assert [p.user for p in result] == ["Hello"]

    def test_unknown_profile_raises(self):
        """Test that an unknown profile is a programming error."""
        with pytest.raises(ValueError, match="Unknown profile"):
            parse_prompts("$$begin\n$$user\nHi\n$$end", profile="creative")


class TestSections:
    """Tests for section content."""

    def test_multiline_content_keeps_blank_lines(self):
        """Test that inner blank lines survive and edges are trimmed."""
        raw = "$$begin\n$$user\n\nLine 1\n\nLine 3\n\n$$end"

        result = parse_prompts(raw)

        assert result[0].user == "Line 1\n\nLine 3"

    def test_section_order_is_irrelevant(self):
        """Test that reordering sections yields the same record."""
        first = parse_prompts(
            "$$begin\n$$system\nSys\n$$options\ntopK=10\n$$segment=a\nA\n$$user\nUsr\n$$end"
        )
        second = parse_prompts(
            "$$begin\n$$user\nUsr\n$$segment=a\nA\n$$options\ntopK=10\n$$system\nSys\n$$end"
        )

        assert first == second
        assert first[0].options == {"topK": 10}

    def test_last_user_section_wins(self):
        """Test that a repeated section replaces the earlier content."""
        raw = "$$begin\n$$user\nFirst\n$$user\nSecond\n$$end"

        assert parse_prompts(raw)[0].user == "Second"

    def test_empty_repeated_section_keeps_earlier_content(self):
        """Test that a marker with no lines does not clear content."""
        raw = "$$begin\n$$user\nFirst\n$$user\n$$end"

        assert parse_prompts(raw)[0].user == "First"

    def test_segments(self):
        """Test named segments, including last-write-wins per name."""
        raw = (
            "$$begin\n$$user\nUser\n"
            "$$segment=intro\nHello\n"
            "$$segment= outro \nBye\n"
            "$$segment=intro\nHi again\n"
            "$$end"
        )

        result = parse_prompts(raw)

        assert result[0].segment == {"intro": "Hi again", "outro": "Bye"}

    def test_segment_without_name_is_dropped(self):
        """Test that $$segment= with no name keeps nothing."""
        raw = "$$begin\n$$user\nUser\n$$segment=\nOrphan\n$$end"

        assert parse_prompts(raw)[0].segment is None

    def test_jsonresponse(self):
        """Test that $$jsonresponse keeps raw multi-line schema text."""
        raw = (
            "$$begin\n$$user\nGenerate\n$$jsonresponse\n"
            "{\n  \"type\": \"object\"\n}\n"
            "$$end"
        )

        result = parse_prompts(raw)

        assert result[0].jsonresponse == '{\n  "type": "object"\n}'

    def test_llm_section(self):
        """Test url and model in the $$llm section."""
        raw = (
            "$$begin\n$$llm\n"
            "url=http://localhost:11434/api?x=1\n"
            "model='llama3.2'\n"
            "other=ignored\n"
            "$$user\nHi\n$$end"
        )

        result = parse_prompts(raw)

        assert result[0].llm == LlmEndpoint(url="http://localhost:11434/api?x=1", model="llama3.2")

    def test_llm_model_is_kept_as_text(self):
        """Test that numeric-looking model names stay strings."""
        raw = "$$begin\n$$llm\nmodel=1\n$$user\nHi\n$$end"

        assert parse_prompts(raw)[0].llm == LlmEndpoint(model="1")

    def test_empty_llm_section_is_absent(self):
        """Test that an $$llm section without url or model is dropped."""
        raw = "$$begin\n$$llm\nurl=\nfoo=bar\n$$user\nHi\n$$end"

        assert parse_prompts(raw)[0].llm is None


class TestOptionsSection:
    """Tests for the $$options section."""

    def test_numeric_values(self):
        """Test integer and float values."""
        raw = "$$begin\n$$options\ntemperature=0.7\ntopP=0.9\nmaxTokens=4096\n$$user\nTest\n$$end"

        result = parse_prompts(raw)

        assert result[0].options == {"temperature": 0.7, "topP": 0.9, "maxTokens": 4096}

    def test_comma_decimal_separator(self):
        """Test that 0,7 reads as 0.7."""
        raw = "$$begin\n$$options\ntemperature=0,7\n$$user\nTest\n$$end"

        assert parse_prompts(raw)[0].options == {"temperature": 0.7}

    def test_boolean_tokens(self):
        """Test the accepted boolean spellings."""
        raw = (
            "$$begin\n$$options\n"
            "penalizeNewline=Y\n"
            "trimWhitespace=0\n"
            "disableContextShift=TRUE\n"
            "$$user\nTest\n$$end"
        )

        result = parse_prompts(raw)

        assert result[0].options == {
            "penalizeNewline": True,
            "trimWhitespace": False,
            "disableContextShift": True,
        }

    def test_zero_and_one_stay_numbers_for_numeric_options(self):
        """Test that 0 and 1 are numbers for integer and float options."""
        raw = "$$begin\n$$options\ntopK=1\nrepeatPenaltyNum=0\nminP=0\n$$user\nTest\n$$end"

        result = parse_prompts(raw)

        assert result[0].options == {"topK": 1, "minP": 0, "repeatPenaltyNum": 0}

    def test_json_values(self):
        """Test arrays and objects written as JSON."""
        raw = (
            "$$begin\n$$options\n"
            "stopSequences=[\"###\", \"END\"]\n"
            "tokenBias={\"123\": 0.5, \"456\": -1}\n"
            "$$user\nTest\n$$end"
        )

        result = parse_prompts(raw)

        assert result[0].options == {
            "stopSequences": ["###", "END"],
            "tokenBias": {"123": 0.5, "456": -1},
        }

    def test_invalid_and_unknown_options_are_dropped(self):
        """Test sparse validation of the section."""
        raw = (
            "$$begin\n$$options\n"
            "temperature=9\n"
            "topK=abc\n"
            "unknownKey=5\n"
            "maxTokens=\n"
            "no equals sign\n"
            "=7\n"
            "seed=42\n"
            "$$user\nTest\n$$end"
        )

        result = parse_prompts(raw)

        assert result[0].options == {"seed": 42}

    def test_all_invalid_options_leave_no_options(self):
        """Test that an empty validated set is absent."""
        raw = "$$begin\n$$options\ntemperature=hot\n$$user\nTest\n$$end"

        assert parse_prompts(raw)[0].options is None

    def test_last_duplicate_key_wins(self):
        """Test that the later line for a key wins."""
        raw = "$$begin\n$$options\ntopK=10\ntopK=20\n$$user\nTest\n$$end"

        assert parse_prompts(raw)[0].options == {"topK": 20}

    def test_oversized_numbers_are_dropped(self):
        """Test that numbers no option can hold are dropped without raising."""
        raw = (
            "$$begin\n$$options\n"
            f"temperature=1{'0' * 400}\n"
            f"topK={'1' * 5000}\n"
            f"tokenBias={{\"a\": 1{'0' * 400}}}\n"
            f"stopSequences=[{'1' * 5000}]\n"
            "topP=0.5\n"
            "$$user\nTest\n$$end"
        )

        result = parse_prompts(raw)

        assert result[0].options == {"topP": 0.5}

    def test_json_profile_validation(self):
        """Test that the profile argument is used for validation."""
        raw = "$$begin\n$$options\ntemperature=0.2\n$$user\nTest\n$$end"

        assert parse_prompts(raw, profile="json")[0].options == {"temperature": 0.2}


class TestDecodeOptionValue:
    """Tests for single value decoding."""

    @pytest.mark.parametrize("text", ["1", "true", "TRUE", "y", "Y"])
    def test_true_tokens(self, text):
        """Test the tokens that decode to True."""
        assert decode_option_value(text) is True

    @pytest.mark.parametrize("text", ["0", "false", "False", "n", "N"])
    def test_false_tokens(self, text):
        """Test the tokens that decode to False."""
        assert decode_option_value(text) is False

    def test_empty_is_absent(self):
        """Test that an empty value decodes to None."""
        assert decode_option_value("") is None
        assert decode_option_value("   ") is None

    def test_numbers(self):
        """Test integer, float and comma-separated numbers."""
        assert decode_option_value("0.7") == 0.7
        assert decode_option_value("0,7") == 0.7
        assert decode_option_value("4096") == 4096
        assert isinstance(decode_option_value("4096"), int)
        assert decode_option_value("-1.5e3") == -1500.0

    def test_numeric_kind_prefers_numbers(self):
        """Test that numeric kinds read 0 and 1 as numbers."""
        assert decode_option_value("1", OptionKind.INTEGER) == 1
        assert decode_option_value("0", OptionKind.FLOAT) == 0
        assert decode_option_value("1", OptionKind.INTEGER) is not True

    def test_quotes_are_stripped(self):
        """Test that matching quotes are removed."""
        assert decode_option_value('"hello"') == "hello"
        assert decode_option_value("'0.5'") == 0.5

    def test_invalid_json_falls_back_to_text(self):
        """Test that broken JSON is kept as text."""
        assert decode_option_value("[not json") == "[not json"

    def test_number_past_int_conversion_limit_is_text(self):
        """Test that a digit string too long for int() is kept as text."""
        digits = "1" * 5000

        assert decode_option_value(digits, OptionKind.INTEGER) == digits

    def test_deeply_nested_json_is_text(self):
        text = "[" * 100000 + "]" * 100000

        assert decode_option_value(text) == text

    def test_special_float_spellings_are_text(self):
        """Test that inf and nan are not numbers."""
        assert decode_option_value("inf") == "inf"
        assert decode_option_value("nan") == "nan"
