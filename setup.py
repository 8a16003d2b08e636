from glob import glob
from setuptools import setup


setup(
    name='rca',
    use_scm_version={
        # Not always built from a checkout.
        'fallback_version': '0.1.0',
    },
    description='RPN calculator, with infix expressions',
    url='https://github.com/pilona/RPN',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    author='Alex Pilon',
    author_email='alp@alexpilon.ca',
    packages=['rca'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.7',
    setup_requires=[
        'setuptools_scm',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
            'bandit',
            'mypy',
            'safety',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
