# backend/streamviz/services/geo/distance.py
from math import radians, sin, cos, asin, sqrt

EARTH_RADIUS_M = 6371000.0


def haversine_m(lat1, lon1, lat2, lon2) -> float:
    """2 点間の大円距離 [m]（haversine、球半径 6,371 km）"""
    dlon, dlat = radians(lon2 - lon1), radians(lat2 - lat1)
    a = sin(dlat/2)**2 + cos(radians(lat1))*cos(radians(lat2))*sin(dlon/2)**2
    # 丸め誤差で a が 1 をわずかに超えることがある
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, a)))
