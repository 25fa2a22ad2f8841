from setuptools import setup, find_packages

setup(
    name = "sigbed",
    version = "0.3.1",
    author = "Benedict Paten",
    package_dir = {'': 'src'},
    packages = find_packages(where='src'),
    include_package_data = True,
    package_data = {
        'sigbed': ['*_config.xml']
    },
    # We use the __file__ attribute so this package isn't zip_safe.
    zip_safe = False,

    python_requires = '>=3.7',

    install_requires = [
        'toil',
        'biopython'],

    extras_require = {
        'test': ['pytest'],
    },

    entry_points= {
        'console_scripts': ['sigbed-intervals = sigbed.intervals.sigbed_intervals:main',
                            'sigbed-mask = sigbed.preprocessor.maskIntervals:main',
                            'sigbed-preprocess = sigbed.preprocessor.sigbed_preprocess:main']},)
