from hiretrack.extensions import db
from hiretrack.models import Job
from datetime import datetime

import click

SAMPLE_JOBS = [
    {
        "title": "Senior Frontend Developer",
        "description": (
            "Build and maintain high-quality web applications using React and TypeScript. "
            "Collaborate with cross-functional teams to deliver features."
        ),
        "department": "Engineering",
        "location": "Remote",
        "skills_json": ["React", "TypeScript", "TailwindCSS"],
        "requirements_json": [
            "5+ years of frontend experience",
            "Strong React knowledge",
            "Experience with TypeScript",
        ],
    },
    {
        "title": "Product Designer",
        "description": (
            "Create beautiful, user-centric designs and work closely with product and "
            "engineering to ship solutions."
        ),
        "department": "Design",
        "location": "San Francisco, CA",
        "skills_json": ["Figma", "Design Systems", "User Research"],
        "requirements_json": ["Portfolio of UX/UI work", "Experience with design systems"],
    },
    {
        "title": "DevOps Engineer",
        "description": "Help scale our infrastructure and CI/CD workflows across environments.",
        "department": "Engineering",
        "location": "New York, NY",
        "skills_json": ["AWS", "Docker", "Kubernetes"],
        "requirements_json": ["3+ years of DevOps", "Kubernetes experience"],
    },
]


def seed():
    click.echo("🌱 Seeding jobs...")

    created = 0
    for data in SAMPLE_JOBS:
        existing_job = Job.query.filter_by(title=data["title"]).first()
        if existing_job:
            click.echo(f"⚠️ Job '{data['title']}' already exists. Skipping insert.")
            continue
        db.session.add(Job(employment_type="Full-time", status="open", posted_date=datetime.utcnow(), **data))
        created += 1

    db.session.commit()
    click.echo(f"✅ Jobs seeded successfully! ({created} added)")
    return created
