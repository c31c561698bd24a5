"""
Setup file.
"""

import os

from setuptools import setup

URL = "https://github.com/jetbuild/jetbuild"
KEYWORDS = "excelsior jet aot native compiler toolchain packaging jvm"
HERE = os.path.dirname(os.path.abspath(__file__))



if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        url=URL,
        include_package_data=True)
