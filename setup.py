from setuptools import setup

setup(
    name='noisy-simulator',
    version='0.1.0',
    description='Shot-based state-vector simulation of quantum circuits with stochastic Pauli noise.',
    package_dir={'': 'src'},
    packages=['noisy_simulator',
              'noisy_simulator._gates',
              'noisy_simulator._simulation',
              'noisy_simulator._utility'],
    install_requires=[
        'numpy',
        'scipy',
        'opt_einsum',
        'qiskit',
    ],
    extras_require={
        'test': ['pytest'],
        'docs': ['sphinx', 'sphinx_rtd_theme'],
    },
    license='MIT',
    python_requires='>=3.9'
)
