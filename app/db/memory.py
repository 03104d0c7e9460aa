"""
In-memory fallback data.

Used when no MONGODB_URI is configured (or MongoDB is unreachable).
Lives for the lifetime of the process only - nothing is persisted and
nothing is shared between worker processes.
"""

DEMO_PROJECTS = [
    {
        "id": "demo-1",
        "title": "Sample Project",
        "description": "This is a sample project served from memory. Add MONGODB_URI to use MongoDB.",
        "image_url": None,
        "status": "active",
        "apply_url": "https://example.com/apply/sample-project",
        "skills": ["React", "TypeScript"],
        "owner_name": "Demo User",
    }
]

DEMO_INTERNSHIPS = [
    {
        "id": "demo-1",
        "title": "Frontend Intern",
        "company_name": "Example Co",
        "description": "Sample internship served from memory. Add MONGODB_URI to use MongoDB.",
        "status": "active",
        "location": "Remote",
        "remote": True,
        "duration": "3 months",
        "stipend": "₹10,000/month",
        "skills": ["React", "CSS"],
        "apply_url": "https://example.com/apply/frontend-intern",
    }
]
