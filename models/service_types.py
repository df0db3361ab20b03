"""Service type catalogue with default intervals and descriptions."""

from enum import Enum


class ServiceType(str, Enum):
    """Known maintenance service types."""

    OIL_CHANGE = "Oil Change"
    TIRE_ROTATION = "Tire Rotation"
    BRAKE_INSPECTION = "Brake Inspection"
    AIR_FILTER = "Air Filter Replacement"
    TRANSMISSION_FLUID = "Transmission Fluid Change"
    COOLANT_FLUSH = "Coolant System Flush"
    SPARK_PLUGS = "Spark Plugs Replacement"
    TIMING_BELT = "Timing Belt Replacement"
    BATTERY_REPLACEMENT = "Battery Replacement"
    WIPER_BLADES = "Wiper Blades Replacement"


# (miles, months)
SERVICE_INTERVALS = {
    ServiceType.OIL_CHANGE: (5000, 6),
    ServiceType.TIRE_ROTATION: (10000, 12),
    ServiceType.BRAKE_INSPECTION: (15000, 12),
    ServiceType.AIR_FILTER: (15000, 12),
    ServiceType.TRANSMISSION_FLUID: (30000, 24),
    ServiceType.COOLANT_FLUSH: (30000, 24),
    ServiceType.SPARK_PLUGS: (60000, 36),
    ServiceType.TIMING_BELT: (90000, 60),
    ServiceType.BATTERY_REPLACEMENT: (50000, 36),
    ServiceType.WIPER_BLADES: (15000, 12),
}

SERVICE_DESCRIPTIONS = {
    ServiceType.OIL_CHANGE: "Replace engine oil and filter to maintain engine performance and longevity.",
    ServiceType.TIRE_ROTATION: "Rotate tires to ensure even wear and extend tire life.",
    ServiceType.BRAKE_INSPECTION: "Inspect brake pads, rotors, and fluid to ensure safe stopping performance.",
    ServiceType.AIR_FILTER: "Replace air filter to maintain engine efficiency and performance.",
    ServiceType.TRANSMISSION_FLUID: (
        "Replace transmission fluid to maintain smooth gear shifting and extend transmission life."
    ),
    ServiceType.COOLANT_FLUSH: "Flush and replace coolant to prevent overheating and protect engine components.",
    ServiceType.SPARK_PLUGS: "Replace spark plugs to maintain engine performance and fuel efficiency.",
    ServiceType.TIMING_BELT: "Replace timing belt to prevent engine damage and maintain proper engine timing.",
    ServiceType.BATTERY_REPLACEMENT: (
        "Replace battery to ensure reliable starting and electrical system performance."
    ),
    ServiceType.WIPER_BLADES: "Replace wiper blades to maintain visibility during inclement weather.",
}
