from glob import glob
from setuptools import setup


setup(
    name='rpn12c',
    use_scm_version={'fallback_version': '0.1.0'},
    description='HP-12C style financial RPN calculator',
    install_requires=[
        'regex',
        'prompt_toolkit',
        'pydantic>=2',
        'pydantic-settings',
    ],
    python_requires='>=3.9',
    packages=['rpn12c'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    setup_requires=[
        'setuptools_scm',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
