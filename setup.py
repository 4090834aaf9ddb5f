from setuptools import setup, find_packages

setup(
    name="semithreads",
    version="0.1.0",
    description="Leaderless threaded discussions built on join-semilattices",
    author="adamfilli",
    packages=find_packages(include=["semithreads", "semithreads.*"]),
    install_requires=[
        "msgpack",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "semithreads=semithreads.cli:main",
        ],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
