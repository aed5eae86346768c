"""
Setup file.
"""

import os

from setuptools import find_packages, setup

KEYWORDS = "bundler javascript css sass less stylus babel coffeescript minify sourcemap gzip"
HERE = os.path.dirname(os.path.abspath(__file__))

INSTALL_REQUIRES = [
    "tqdm>=4.60",
    "rjsmin>=1.2",
    "rcssmin>=1.1",
]

EXTRAS_REQUIRE = {
    "sass": ["libsass>=0.22"],
    "less": ["lesscpy>=0.15"],
    "stylus": ["stylus>=0.1"],
    "babel": ["dukpy>=0.3,<0.6"],
    "coffee": ["dukpy>=0.3,<0.6"],
    "test": ["pytest>=7.0"],
}
EXTRAS_REQUIRE["all"] = sorted(
    {req for name, reqs in EXTRAS_REQUIRE.items() if name != "test" for req in reqs}
)


if __name__ == "__main__":
    setup(
        name="webbuild",
        version="0.1.0",
        description="Declarative script and stylesheet bundler",
        keywords=KEYWORDS,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        package_data={"webbuild": ["runtime/*.js"]},
        include_package_data=True,
        install_requires=INSTALL_REQUIRES,
        extras_require=EXTRAS_REQUIRE,
        entry_points={
            "console_scripts": [
                "webbuild=webbuild.cli:main",
            ],
        },
    )
