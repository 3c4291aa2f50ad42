"""Seed the CareerCrafter database with demo users and jobs.

Usage (from the repository root):
    python -m scripts.seed_data
"""
from careercrafter.models import Job, User
from careercrafter.platform.database import Base, SessionLocal, engine
from careercrafter.services.user_store import increment_credits, set_premium_flag

DEMO_JOBS = [
    {
        "title": "Senior React Developer",
        "company": "Brightpath Labs",
        "description": "Build accessible React interfaces for a hiring marketplace. TypeScript and testing culture.",
        "industry": "Technology",
        "required_skills": ["react", "javascript", "typescript"],
        "preferred_skills": ["redux", "jest"],
        "experience_level": "senior",
        "education_level": "bachelor",
        "salary_min": 6000,
        "salary_max": 8000,
        "location": "Remote",
        "work_mode": "remote",
        "job_type": "full-time",
    },
    {
        "title": "Frontend Engineer",
        "company": "Northwind Digital",
        "description": "Own the design system and ship features in React and Next.js.",
        "industry": "Technology",
        "required_skills": ["react", "css"],
        "preferred_skills": ["next.js"],
        "experience_level": "mid",
        "education_level": "bachelor",
        "salary_min": 4500,
        "salary_max": 6000,
        "location": "Berlin, Germany",
        "work_mode": "hybrid",
        "job_type": "full-time",
    },
    {
        "title": "Python Backend Developer",
        "company": "Datawell",
        "description": "Design FastAPI services and data pipelines on PostgreSQL.",
        "industry": "Data",
        "required_skills": ["python", "fastapi", "postgresql"],
        "preferred_skills": ["docker"],
        "experience_level": "mid",
        "education_level": "bachelor",
        "salary_min": 5000,
        "salary_max": 7000,
        "location": "London, UK",
        "work_mode": "on-site",
        "job_type": "full-time",
    },
    {
        "title": "Junior Node.js Developer",
        "company": "Shiftly",
        "description": "Help build REST APIs in Node and Express for our scheduling product.",
        "industry": "Technology",
        "required_skills": ["node", "javascript"],
        "preferred_skills": ["mongodb"],
        "experience_level": "entry",
        "education_level": "associate",
        "salary_min": 2500,
        "salary_max": 3500,
        "location": "Remote",
        "work_mode": "remote",
        "job_type": "contract",
    },
]

DEMO_USERS = [
    {
        "email": "ava.seeker@careercrafter.dev",
        "full_name": "Ava Seeker",
        "skills": ["react", "javascript", "css"],
        "desired_job_title": "Frontend Engineer",
        "years_of_experience": "4 years",
        "education": "Bachelor of Science",
        "expected_salary": 5500,
        "preferred_location": "remote",
        "preferred_job_type": "full-time",
    },
    {
        "email": "omar.premium@careercrafter.dev",
        "full_name": "Omar Premium",
        "skills": ["python", "fastapi"],
        "desired_job_title": "Backend Developer",
        "years_of_experience": "senior",
        "education": "master",
        "expected_salary": 6500,
        "preferred_location": "London",
        "preferred_job_type": "full-time",
    },
]


def seed():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(User).first():
            print("Database already seeded. Skipping.")
            return

        for payload in DEMO_JOBS:
            db.add(Job(status="active", **payload))
        for payload in DEMO_USERS:
            db.add(User(role="job_seeker", **payload))
        db.commit()

        increment_credits(
            db,
            "ava.seeker@careercrafter.dev",
            50,
            reason="demo_grant",
            external_ref="seed:ava:credits",
        )
        set_premium_flag(db, "omar.premium@careercrafter.dev", True, plan="premium_monthly")

        print(f"Seeded {len(DEMO_USERS)} users and {len(DEMO_JOBS)} jobs.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
