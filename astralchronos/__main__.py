from astralchronos.main import run_server

run_server()
