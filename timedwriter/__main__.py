from timedwriter.main import program

program.run()
