"""Drivers, rides, a ride queue, a ride tracker and a dispatcher."""