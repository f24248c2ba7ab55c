"""
Setup file.
"""


from setuptools import find_packages, setup

URL = "https://github.com/yabs-build/yabs"
KEYWORDS = "build system c c++ compiler incremental parallel make"



if __name__ == "__main__":
    setup(
        name="yabs",
        version="0.1.0",
        description="Yet another build system for compiled C/C++ projects",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["yabs = yabs.cli:main"]},
        include_package_data=True)
