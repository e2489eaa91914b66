from invest_projection.simulation.runner import main

if __name__ == "__main__":
    main()
