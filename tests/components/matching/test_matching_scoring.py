"""Tests for the deterministic compatibility scorer."""

from careercrafter.components.matching.profile import normalize_job_posting, normalize_user_profile
from careercrafter.components.matching.rules import Recommendation, recommendation_for
from careercrafter.components.matching.scoring_core import rank_matches, score_match, select_top_matches
from careercrafter.platform.config import MatchingLimits

LIMITS = MatchingLimits(provider_candidates=20, fallback_candidates=50, max_results=10, min_score=60)

SEEKER = {
    "skills": ["react", "javascript"],
    "years_of_experience": "3 years",
    "education": "bachelor",
    "expected_salary": 5000,
    "preferred_location": "remote",
    "preferred_job_type": "full-time",
}


def _job(job_id, **overrides):
    fields = {
        "id": job_id,
        "title": "React Developer",
        "description": "Build user interfaces",
        "required_skills": ["react", "javascript"],
        "experience_level": "mid",
        "education_level": "bachelor",
        "salary_min": 4000,
        "salary_max": 6000,
        "location": "Remote",
        "work_mode": "remote",
        "job_type": "full-time",
    }
    fields.update(overrides)
    return normalize_job_posting(fields)


def _python_job(job_id):
    return _job(job_id, title="Python Developer", description="Build data pipelines", required_skills=["python", "django"])


class TestScoreMatch:
    def test_perfect_fit_is_capped_at_95(self):
        result = score_match(normalize_user_profile(SEEKER), _job("1"))

        assert result.match_score == 95
        assert result.recommendation == Recommendation.HIGHLY_RECOMMENDED
        assert result.fit_analysis.skills == 100
        assert result.fit_analysis.location == 100
        assert "2/2 skills matched" in result.reasons
        assert result.strengths == ["Strong skills alignment", "Relevant experience", "Good salary fit"]
        assert result.improvements == ["Continue building experience"]

    def test_skill_mismatch_lowers_score_and_suggests_missing_skills(self):
        result = score_match(normalize_user_profile(SEEKER), _python_job("2"))

        # 0 skills + 20 + 10 + 15 + 10 + 10 + 3.75 growth credit
        assert result.match_score == 69
        assert result.fit_analysis.skills == 0
        assert result.recommendation == Recommendation.MODERATE_MATCH
        assert result.improvements[0] == "Build skills in: python, django"

    def test_user_without_skills_gets_neutral_skills_score(self):
        profile = normalize_user_profile({**SEEKER, "skills": []})
        result = score_match(profile, _job("3"))

        assert result.fit_analysis.skills == 50

    def test_experience_gaps(self):
        profile = normalize_user_profile({**SEEKER, "years_of_experience": "1 year"})

        assert score_match(profile, _job("4", experience_level="mid")).fit_analysis.experience == 70
        assert score_match(profile, _job("5", experience_level="senior")).fit_analysis.experience == 40

    def test_salary_bands(self):
        profile = normalize_user_profile(SEEKER)

        assert score_match(profile, _job("6", salary_min=4000, salary_max=6000)).fit_analysis.salary == 100
        assert score_match(profile, _job("7", salary_min=3000, salary_max=4500)).fit_analysis.salary == 80
        assert score_match(profile, _job("8", salary_min=5500, salary_max=7000)).fit_analysis.salary == 70
        assert score_match(profile, _job("9", salary_min=9000, salary_max=12000)).fit_analysis.salary == 50
        assert score_match(profile, _job("10", salary_min=0, salary_max=0)).fit_analysis.salary == 50

    def test_location_and_job_type(self):
        profile = normalize_user_profile({**SEEKER, "preferred_location": "Berlin", "preferred_job_type": "full-time"})

        assert score_match(profile, _job("11", work_mode="hybrid")).fit_analysis.location == 80
        assert score_match(profile, _job("12", work_mode="on-site", location="Berlin, Germany")).fit_analysis.location == 90
        assert score_match(profile, _job("13", work_mode="on-site", location="Paris")).fit_analysis.location == 50
        assert score_match(profile, _job("14", job_type="contract")).fit_analysis.culture == 70

    def test_score_is_always_within_bounds(self):
        profiles = [normalize_user_profile(SEEKER), normalize_user_profile({}), normalize_user_profile({"skills": ["cobol"]})]
        jobs = [_job("15"), _python_job("16"), normalize_job_posting({"id": 17})]
        for profile in profiles:
            for job in jobs:
                score = score_match(profile, job).match_score
                assert 0 <= score <= 95


class TestRanking:
    def test_react_job_ranks_above_python_job(self):
        results = rank_matches(normalize_user_profile(SEEKER), [_python_job("py"), _job("react")], LIMITS)

        assert [r.job_id for r in results] == ["react", "py"]
        assert [r.match_score for r in results] == [95, 69]

    def test_low_scores_are_dropped(self):
        poor_fit = _job(
            "poor",
            title="Python Developer",
            description="Data work",
            required_skills=["python"],
            experience_level="senior",
            education_level="master",
            salary_min=9000,
            salary_max=12000,
            location="Paris",
            work_mode="on-site",
            job_type="contract",
        )
        assert rank_matches(normalize_user_profile(SEEKER), [poor_fit], LIMITS) == []

    def test_only_first_fifty_candidates_are_scored_and_results_are_capped(self):
        jobs = [_python_job(f"py-{i}") for i in range(50)] + [_job(f"react-{i}") for i in range(5)]
        results = rank_matches(normalize_user_profile(SEEKER), jobs, LIMITS)

        assert len(results) == 10
        assert all(r.job_id.startswith("py-") for r in results)
        scores = [r.match_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_select_top_matches_orders_descending_and_caps(self):
        profile = normalize_user_profile(SEEKER)
        results = [score_match(profile, _python_job(f"p{i}")) for i in range(3)]
        results += [score_match(profile, _job(f"r{i}")) for i in range(12)]
        top = select_top_matches(results, LIMITS)

        assert len(top) == 10
        assert all(r.match_score == 95 for r in top)


def test_recommendation_thresholds():
    assert recommendation_for(80) == Recommendation.HIGHLY_RECOMMENDED
    assert recommendation_for(79) == Recommendation.GOOD_MATCH
    assert recommendation_for(70) == Recommendation.GOOD_MATCH
    assert recommendation_for(69) == Recommendation.MODERATE_MATCH
