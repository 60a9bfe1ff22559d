"""Tests for knowledge-base flattening, fuzzy matching and answer assembly."""

import dataclasses

import pytest

from answer_builder import build_answer, follow_ups_for
from document_index import Document, DocumentIndex
from exception_logger import exception_logger
from matcher import Matcher
from shortcuts import DEFAULT_SHORTCUTS, find_shortcut


class TestDocumentIndex:

    def test_ids_and_order(self, knowledge_base):
        index = DocumentIndex.from_knowledge_base(knowledge_base)
        assert [doc.id for doc in index] == [
            "profile", "projects-0", "projects-1", "projects-2", "experiences-0",
        ]
        assert [doc.position for doc in index] == [0, 1, 2, 3, 4]
        assert index.get("projects-1").name == "Campus Connect"
        assert index.get("projects-9") is None

    def test_empty_knowledge_base(self):
        index = DocumentIndex.from_knowledge_base({})
        assert len(index) == 0
        assert Matcher(index).search("anything") == []

    def test_malformed_values_are_skipped(self):
        index = DocumentIndex.from_knowledge_base({
            "projects": [{"name": "Ok"}, "not a record", None],
            "motto": "just a string",
        })
        assert [doc.id for doc in index] == ["projects-0"]
        assert len(exception_logger.recent("index")) == 3

    def test_malformed_list_field_becomes_absent(self):
        index = DocumentIndex.from_knowledge_base({
            "projects": [{"name": "Odd", "technologies": 42, "skills": {"a": 1}}],
        })
        doc = index.get("projects-0")
        assert doc.technologies == ()
        assert doc.skills == ()
        assert "Technologies" not in build_answer(doc, "projects").text

    def test_list_field_coercion(self):
        index = DocumentIndex.from_knowledge_base({
            "projects": [{
                "name": "Coerced",
                "technologies": "React",
                "tags": [{"name": "web"}, {"color": "red"}, None, "api"],
                "problemsSolved": ["Slow search"],
                "companyName": "Acme",
                "sourceLink": "https://example.com",
            }],
        })
        doc = index.get("projects-0")
        assert doc.technologies == ("React",)
        assert doc.tags == ("web", "api")
        assert doc.problems_solved == ("Slow search",)
        assert doc.company_name == "Acme"
        assert doc.source_link == "https://example.com"

    def test_label_fallbacks(self):
        assert Document("x", "x", 0, title="T", name="N").label == "T"
        assert Document("x", "x", 0, name="N", company_name="C").label == "N"
        assert Document("x", "x", 0, company_name="C").label == "C"
        assert Document("x", "x", 0).label == "Item"

    def test_documents_keep_only_their_fields(self, knowledge_base):
        doc = DocumentIndex.from_knowledge_base(knowledge_base).get("projects-0")
        assert "raw" not in {f.name for f in dataclasses.fields(doc)}


class TestMatcher:

    @pytest.fixture
    def matcher(self, knowledge_base):
        return Matcher(DocumentIndex.from_knowledge_base(knowledge_base))

    def test_exact_name_scores_zero(self, matcher):
        results = matcher.search("MedHub Ethiopia")
        assert results[0].document.id == "projects-0"
        assert results[0].score == 0.0
        assert results[0].field == "name"

    def test_case_and_filler_words_are_ignored(self, matcher):
        results = matcher.search("TELL ME ABOUT MEDHUB ETHIOPIA?")
        assert results[0].document.id == "projects-0"
        assert results[0].score == 0.0

    def test_minor_misspelling_still_matches(self, matcher):
        results = matcher.search("medhub ethiopa")
        assert results[0].document.id == "projects-0"
        assert results[0].score <= 0.35

    def test_results_sorted_and_bounded(self, matcher):
        for query in ("react", "student registration", "dashboards", "weather app"):
            scores = [candidate.score for candidate in matcher.search(query)]
            assert scores == sorted(scores)
            assert all(0.0 <= score <= 1.0 for score in scores)

    def test_unrelated_documents_are_excluded(self, matcher):
        ids = [candidate.document.id for candidate in matcher.search("medhub")]
        assert "projects-0" in ids
        assert "projects-1" not in ids

    def test_nonsense_matches_nothing(self, matcher):
        assert matcher.search("xyzzy qwfp") == []
        assert matcher.search("") == []

    def test_ties_keep_build_order(self):
        index = DocumentIndex.from_knowledge_base({"projects": [{"name": "Twin"}, {"name": "Twin"}]})
        results = Matcher(index).search("twin")
        assert [c.document.id for c in results] == ["projects-0", "projects-1"]
        assert results[0].score == results[1].score == 0.0

    def test_best_field_wins_over_weaker_fields(self):
        index = DocumentIndex.from_knowledge_base({
            "projects": [
                {"name": "Atlas", "description": "nothing relevant here, just a long unrelated blurb"},
                {"name": "Other", "description": "an atlus clone"},
            ]
        })
        results = Matcher(index).search("atlas")
        assert results[0].document.name == "Atlas"
        assert results[0].score == 0.0
        assert results[1].document.name == "Other"
        assert results[1].score > 0.0

    def test_weighted_score(self):
        assert Matcher.weighted_score(1.0, 0.6) == 0.0
        assert Matcher.weighted_score(0.0, 0.9) == 1.0
        # same similarity scores worse on a lighter field
        assert Matcher.weighted_score(0.7, 0.6) > Matcher.weighted_score(0.7, 0.9)

    def test_short_strings_skip_partial_alignment(self):
        assert Matcher.similarity("go", "good food") < 0.65

    def test_short_field_value_does_not_align_inside_longer_query(self):
        assert Matcher.similarity("job experiences", "express") < 0.65
        assert Matcher.similarity("experiences", "express") < 1.0
        assert Matcher.similarity("medhub", "medhub ethiopia") == 1.0


class TestAnswerBuilder:

    def test_project_answer_in_field_order(self, knowledge_base):
        doc = DocumentIndex.from_knowledge_base(knowledge_base).get("projects-0")
        answer = build_answer(doc, "projects")
        lines = answer.text.splitlines()
        assert lines[0] == "✨ MedHub Ethiopia"
        text = answer.text
        assert text.index("A platform") < text.index("Problems solved: Medicine availability lookup")
        assert text.index("Problems solved") < text.index("Technologies: MongoDB, Express, React, Node.js")
        assert text.index("Technologies") < text.index("🔗 Link: https://example.com/medhub")
        assert "Media" not in text
        assert "Impact" not in text
        assert len(answer.follow_ups) == 2
        assert "performance" in answer.follow_ups[0]

    def test_experience_uses_skills_gained(self, knowledge_base):
        doc = DocumentIndex.from_knowledge_base(knowledge_base).get("experiences-0")
        answer = build_answer(doc, "experiences")
        assert answer.text.startswith("✨ Frontend Developer")
        assert "Skills: Design systems" in answer.text
        assert answer.follow_ups == follow_ups_for("experiences")

    def test_other_categories_get_one_prompt(self, knowledge_base):
        doc = DocumentIndex.from_knowledge_base(knowledge_base).get("profile")
        answer = build_answer(doc, "profile")
        assert "Skills: React, Python" in answer.text
        assert len(answer.follow_ups) == 1

    def test_answer_is_pure(self, knowledge_base):
        doc = DocumentIndex.from_knowledge_base(knowledge_base).get("projects-1")
        assert build_answer(doc, "projects") == build_answer(doc, "projects")


class TestShortcuts:

    def test_phrasings(self):
        assert find_shortcut("Which projects used MERN stack?").name == "mern"
        assert find_shortcut("mern projects").name == "mern"
        assert find_shortcut("which projects used mern stak").name == "mern"
        assert find_shortcut("python projects").name == "python"
        assert find_shortcut("tell me about medhub") is None

    def test_mern_filter(self, knowledge_base):
        docs = DocumentIndex.from_knowledge_base(knowledge_base).documents
        rule = DEFAULT_SHORTCUTS[0]
        assert [doc.name for doc in rule.select(docs)] == ["MedHub Ethiopia"]
