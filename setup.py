from os import path

import setuptools

path_to_repo = path.abspath(path.dirname(__file__))
with open(path.join(path_to_repo, 'readme.md'), encoding='utf-8') as f:
    long_description = f.read()

required_pypi = [
    'joblib',  # parallel fitting over columns
    'matplotlib',
    'numpy',
    'pandas',
    'scikit-learn>=1.2',  # OneHotEncoder(sparse_output=...)
    'tqdm',
]

setuptools.setup(
    name="lucskdd",
    version="0.1.0",
    author="lucskdd developers",
    description="Supervised LUCS-KDD DN discretization compatible with scikit-learn",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(
        exclude=['tests', 'tests.*', '*.tests', '*.tests.*']
    ),
    install_requires=required_pypi,
    extras_require={
        'dev': [
            'pytest',
            'pytest-cov',
        ]
    },
    python_requires='>=3.9.0',
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
