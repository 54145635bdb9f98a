"""
Natours Auth - authentication and credential lifecycle for the Natours tour-booking API
"""
from setuptools import setup, find_packages

setup(
    name="natours-auth",
    version="1.0.0",
    description="Authentication service and shared auth library for the Natours API",
    author="Natours Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "sqlalchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-jose[cryptography]>=3.3.0",
        "bcrypt>=4.0.0",
        "email-validator>=2.0.0",
        "jinja2>=3.1.0",
        "slowapi>=0.1.9",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "httpx>=0.25.0",
        ],
    },
)
