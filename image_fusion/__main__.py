# image_fusion/__main__.py
from image_fusion.app import main

main()
