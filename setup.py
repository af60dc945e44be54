from setuptools import setup, find_namespace_packages

setup(
    name="insight_shelf",
    version="0.1.0",
    packages=find_namespace_packages(include=['shelf*', 'cli*', 'api*']),
    include_package_data=True,
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "pydantic>=2",
        "fastapi",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",  # FastAPI TestClient
        ],
    },
    entry_points={
        "console_scripts": [
            "shelf=cli.main:main",
        ],
    },
)
