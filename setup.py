from setuptools import setup, find_packages

setup(
    name="ytp-glitch",
    version="0.1.0",
    description="Randomized stutter, scramble and rave-cut edits for timeline segments",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "soundfile>=0.12",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "ytpglitch=ytpglitch.cli:main",
        ],
    },
)
