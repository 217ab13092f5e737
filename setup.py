from setuptools import setup, find_packages

setup(
    name="sitemap_digest",
    version="1.0.0",
    description="Batch sitemap monitoring with immediate chat notifications and keyword digests",
    author="Your Name",
    author_email="your.email@example.com",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "feedparser>=6.0.0",
        "pandas>=1.3.0",
        "gspread>=5.0.0",
        "oauth2client>=4.1.3",
        "beautifulsoup4>=4.9.3",
        "pytz>=2021.1",
        "python-dotenv>=0.19.0",
        "PyYAML>=6.0",
        "requests>=2.31.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "APScheduler>=3.10,<4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24.0",
        ],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "run-sitemap-monitor=sitemap_digest.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
