import pytest


@pytest.fixture
def sample_courses():
    """Small catalog used across the suite."""
    return [
        {
            "courseCode": "CS101",
            "title": "Introduction to Programming",
            "department": "CS",
            "level": 100,
            "credits": 4,
            "description": "Variables, loops and functions.",
            "terms": ["Fall", "Spring"],
            "prerequisites": [],
        },
        {
            "courseCode": "MATH210",
            "title": "Linear Algebra",
            "department": "MATH",
            "level": 200,
            "credits": 3,
            "description": "Vector spaces and matrices.",
            "terms": ["Fall"],
            "prerequisites": ["MATH110"],
        },
        {
            "courseCode": "ENGR300",
            "title": "Systems Engineering",
            "department": "Engineering",
            "level": 300,
            "credits": 3,
            "description": "Requirements, design reviews and verification.",
            "terms": ["Spring"],
            "prerequisites": ["CS101", "MATH210"],
        },
        {
            "courseCode": "CS250",
            "title": "Data Structures",
            "department": "CS",
            "level": 200,
            "credits": 4,
            "description": "Lists, stacks, hash tables and graphs.",
            "terms": ["Spring"],
            "prerequisites": ["CS101"],
        },
    ]
