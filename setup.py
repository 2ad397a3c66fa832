from setuptools import setup

DEPENDENCIES = [
    "colorama>=0.4.1",
    "configobj>=5.0.6",
    "mozinfo>=1.1.0",
    "mozlog>=4.0",
]

TEST_DEPENDENCIES = [
    "coverage",
    "flake8",
    "mock>=3.0",
    "mozfile>=2.0.0",
    "pytest>=7.0",
    "pytest-mock>=3.0",
]

desc = """Find the revision at which the output of a test command changed"""
long_desc = """Find the revision at which the output of a test command changed.
revbisect bisects a linear revision history (e.g. a subversion repository):
it syncs the working copy to revisions between a low and a high revision,
runs a test command, and compares its output with the output of the low
and high revisions until the exact boundary is found."""

setup(
    name="revbisect",
    version="0.1.0",
    description=desc,
    long_description=long_desc,
    license="MPL 2.0",
    packages=["revbisect"],
    entry_points="""
          [console_scripts]
          revbisect = revbisect.main:main
        """,
    platforms=["Any"],
    python_requires=">=3.6",
    install_requires=DEPENDENCIES,
    extras_require={"test": TEST_DEPENDENCIES},
    classifiers=[
        "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)",
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Version Control",
        "Programming Language :: Python :: 3 :: Only",
    ],
)
