import setuptools

setuptools.setup(
    name="dutch_flashcards",
    version="0.1",
    author="yochi",
    author_email="pedrogush@gmail.com",
    description="Dutch vocabulary flashcards: card store, deck hierarchy, duplicate merging and CSV import/export",
    packages=["models", "repositories", "services", "controllers", "utils"],
    py_modules=["main"],
    classifiers=["Programming Language :: Python :: 3", "Operating System :: OS Independent"],
    python_requires=">=3.11",
    install_requires=[
        "loguru",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={"console_scripts": ["flashcards=main:main"]},
)
