from setuptools import setup, find_packages

setup(
    name="cardmate",
    version="0.1.0",
    description="Disc golf scorekeeping with synced players, courses and scorecards",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"cardmate": ["py.typed"]},
    install_requires=[
        'requests>=2.31.0',
        'PyYAML>=6.0',
        'tabulate>=0.9.0',
        'typing_extensions>=4.5.0'
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'requests-mock>=1.11.0'
        ]
    },
    entry_points={
        'console_scripts': [
            'cardmate=cardmate.cli:main'
        ]
    }
)
