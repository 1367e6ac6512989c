from setuptools import find_packages, setup

package_name = 'heblo_warehouse'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test', 'test.*']),
    python_requires='>=3.11',
    package_data={
        package_name: ['config/config.yaml'],
    },
    install_requires=[
        'setuptools',
        'paho-mqtt>=2.0',
        'pyyaml',
        'networkx',
    ],
    zip_safe=True,
    maintainer='hansoo',
    maintainer_email='hansoo@todo.todo',
    description='Transport box workflow and catalog merge scheduling '
                'for the Heblo warehouse',
    license='Apache-2.0',
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'heblo_worker = heblo_warehouse.presentation.main:main',
        ],
    },
)
