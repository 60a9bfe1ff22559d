"""Tests for normalization, edit distance, small talk and synonym expansion."""

from small_talk import SmallTalkClassifier
from synonym_expander import SynonymExpander, clean_synonym_map
from text_normalizer import contains_run, edit_distance, normalize, normalized_text

import assistant_config as config


class TestNormalize:

    def test_lowercases_and_strips_punctuation(self):
        assert normalize("Hello, World!") == ["hello", "world"]

    def test_keeps_hyphens_and_underscores(self):
        assert normalize("Front-end snake_case v2") == ["front-end", "snake_case", "v2"]

    def test_curly_quotes_are_straightened_then_split(self):
        # the straight apostrophe is punctuation too
        assert normalize("Nati’s “projects”") == ["nati", "s", "projects"]

    def test_empty_input(self):
        assert normalize("") == []
        assert normalize(None) == []
        assert normalize("  ?!  ") == []

    def test_normalized_text_joins_tokens(self):
        assert normalized_text("  Which   projects?? ") == "which projects"

    def test_contains_run(self):
        assert contains_run(["client", "side", "rendering"], ["client", "side"])
        assert not contains_run(["side", "client"], ["client", "side"])
        assert not contains_run(["client"], [])


class TestEditDistance:

    def test_classic_examples(self):
        assert edit_distance("kitten", "sitting") == 3
        assert edit_distance("helo", "hello") == 1
        assert edit_distance("", "abc") == 3
        assert edit_distance("same", "same") == 0


class TestSmallTalk:

    def setup_method(self):
        self.classifier = SmallTalkClassifier()

    def test_greeting(self):
        assert self.classifier.classify("hi") == config.SMALL_TALK_RESPONSES["hi"]
        assert self.classifier.classify("Hello there!") == config.SMALL_TALK_RESPONSES["hello"]
        assert self.classifier.classify("hey") == config.SMALL_TALK_RESPONSES["hey"]

    def test_typo_on_long_key(self):
        assert self.classifier.classify("helo") == config.SMALL_TALK_RESPONSES["hello"]

    def test_every_small_talk_token_answers(self):
        for token in config.SMALL_TALK_TOKENS:
            assert self.classifier.classify(token), token
            assert self.classifier.classify(f"{token} {token} {token}"), token

    def test_long_queries_never_small_talk(self):
        assert self.classifier.classify("hi hi hi hi") is None
        assert self.classifier.classify("hi, which projects used react?") is None
        assert self.classifier.classify("thanks what about his skills") is None

    def test_short_content_words_are_not_greetings(self):
        assert self.classifier.classify("to") is None
        assert self.classifier.classify("i") is None
        assert self.classifier.classify("food app") is None
        assert self.classifier.classify("") is None

    def test_first_key_in_order_wins(self):
        classifier = SmallTalkClassifier(
            responses={"thanks": "A", "thank": "B"}, tokens={"thanks", "thank"}
        )
        # "thank" is one edit away from "thanks", which is tried first
        assert classifier.classify("thank") == "A"


class TestSynonymExpander:

    def setup_method(self):
        self.expander = SynonymExpander({
            "databases": ["db", "sql"],
            "frontend": ["ui", "client side"],
        })

    def test_appends_canonical_term(self):
        assert self.expander.expand("Which DB does he know") == "Which DB does he know databases"

    def test_multiple_terms_follow_table_order(self):
        assert self.expander.expand("ui and sql work") == "ui and sql work databases frontend"

    def test_multi_word_synonym(self):
        assert self.expander.expand("client side rendering") == "client side rendering frontend"

    def test_no_synonym_leaves_query_alone(self):
        assert self.expander.expand("tell me about medhub") == "tell me about medhub"

    def test_substring_is_not_a_token_match(self):
        assert self.expander.expand("guide") == "guide"

    def test_expansion_is_idempotent(self):
        once = self.expander.expand("sql and ui")
        assert self.expander.expand(once) == once

    def test_canonical_already_present_is_not_repeated(self):
        assert self.expander.expand("databases and db") == "databases and db"

    def test_malformed_entries_are_dropped(self):
        cleaned = clean_synonym_map({"good": ["A", " b "], "bad": 42, 7: ["x"], "single": "one"})
        assert cleaned == {"good": ("a", "b"), "single": ("one",)}
