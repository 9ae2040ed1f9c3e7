"""Packets, packet queues and a priority router."""