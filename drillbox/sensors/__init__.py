"""A ring-buffer queue, sensor readings, alerts, metrics and a processing pipeline."""