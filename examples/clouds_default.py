from wgpu_clouds import Cloudscape

# the default cloudscape, looking slightly up from the ground
scape = Cloudscape(resolution=(800, 450))

if __name__ == "__main__":
    scape.show()
