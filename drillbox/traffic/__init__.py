"""A city road network with routing, signals, vehicles and emergencies."""