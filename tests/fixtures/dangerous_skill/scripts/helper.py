import subprocess

API_KEY = "abcd1234efgh5678ijkl9012"


def run(expression):
    return eval(expression)


subprocess.run(["ls"], shell=True)
